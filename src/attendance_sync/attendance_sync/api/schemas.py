"""Typed shapes of the remote API responses.

Everything coming off the wire goes through ``parse_response`` so a missing
or mistyped field fails here with ``MalformedResponse``.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from ..core.exceptions import MalformedResponse
from ..geo.model import GeofenceSite

ModelT = TypeVar("ModelT", bound=BaseModel)


class SiteSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    name: str = ""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    radius_meters: float = Field(ge=0, validation_alias=AliasChoices("radius_meters", "radius"))
    address: Optional[str] = None

    def to_site(self) -> GeofenceSite:
        return GeofenceSite(
            id=self.id,
            name=self.name,
            latitude=self.latitude,
            longitude=self.longitude,
            radius_meters=self.radius_meters,
            address=self.address,
        )


class GeofenceVerificationResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    is_within_geofence: bool = Field(validation_alias=AliasChoices("is_within_geofence", "isWithinGeofence"))
    distance: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("distance", "distance_meters", "distanceMeters"))
    site: Optional[SiteSchema] = Field(default=None, validation_alias=AliasChoices("site", "branch"))
    sites: Optional[List[SiteSchema]] = None
    message: Optional[str] = None


class AttendanceWriteResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: Optional[str] = None
    client_id: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None


def parse_response(model: Type[ModelT], payload: Any) -> ModelT:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise MalformedResponse(f"{model.__name__}: {exc.error_count()} invalid field(s): {exc}") from exc
