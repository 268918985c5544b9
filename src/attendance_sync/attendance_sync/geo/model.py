from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_latitude, require_longitude, require_non_negative
from ..core.enums import VerdictSource


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def __post_init__(self):
        object.__setattr__(self, "latitude", require_latitude(self.latitude))
        object.__setattr__(self, "longitude", require_longitude(self.longitude))


@dataclass(frozen=True)
class PositionFix:
    """A single reading of device position. Never persisted."""

    latitude: float
    longitude: float
    accuracy_meters: Optional[float] = None
    captured_at: datetime = field(default_factory=now_utc)

    def __post_init__(self):
        object.__setattr__(self, "latitude", require_latitude(self.latitude))
        object.__setattr__(self, "longitude", require_longitude(self.longitude))
        if self.accuracy_meters is not None:
            object.__setattr__(self, "accuracy_meters", require_non_negative(self.accuracy_meters, "accuracy_meters"))

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class GeofenceSite:
    """Circular work-site boundary, read-only reference data from the server."""

    id: str
    name: str
    latitude: float
    longitude: float
    radius_meters: float
    address: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "latitude", require_latitude(self.latitude))
        object.__setattr__(self, "longitude", require_longitude(self.longitude))
        object.__setattr__(self, "radius_meters", require_non_negative(self.radius_meters, "radius_meters"))

    @property
    def center(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius_meters": self.radius_meters,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GeofenceSite":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            radius_meters=float(data["radius_meters"]),
            address=data.get("address"),
        )


@dataclass(frozen=True)
class GeofenceVerdict:
    """Derived on every check, not persisted."""

    within_bounds: bool
    source: VerdictSource
    distance_meters: Optional[float] = None
    site: Optional[GeofenceSite] = None
