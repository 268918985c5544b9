from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import now_utc, parse_iso_date, parse_iso_datetime, to_iso
from ..common.validators import require_latitude, require_longitude, require_non_empty, require_non_negative
from ..core.exceptions import ValidationError


def new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class OfflineAttendanceRecord:
    """A check-in/check-out captured on the device and not yet confirmed by the server."""

    employee_id: str
    date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_meters: Optional[float] = None
    is_synced: bool = False
    sync_attempts: int = 0
    sync_error: Optional[str] = None
    id: str = field(default_factory=new_record_id)
    created_at: datetime = field(default_factory=now_utc)

    def __post_init__(self):
        object.__setattr__(self, "id", require_non_empty(self.id, "id"))
        object.__setattr__(self, "employee_id", require_non_empty(self.employee_id, "employee_id"))
        if self.check_out_time is not None and self.check_in_time is None:
            raise ValidationError("check_out_time requires check_in_time")
        if (self.latitude is None) != (self.longitude is None):
            raise ValidationError("latitude and longitude must be given together")
        if self.latitude is not None:
            object.__setattr__(self, "latitude", require_latitude(self.latitude))
            object.__setattr__(self, "longitude", require_longitude(self.longitude))
        if self.accuracy_meters is not None:
            object.__setattr__(self, "accuracy_meters", require_non_negative(self.accuracy_meters, "accuracy_meters"))
        if int(self.sync_attempts) < 0:
            raise ValidationError("sync_attempts must be >= 0")
        object.__setattr__(self, "sync_attempts", int(self.sync_attempts))

    def with_changes(self, **patch: Any) -> "OfflineAttendanceRecord":
        """Return a copy with ``patch`` applied, enforcing the lifecycle rules."""
        if "id" in patch and patch["id"] != self.id:
            raise ValidationError("record id cannot change")
        if self.is_synced and not bool(patch.get("is_synced", True)):
            raise ValidationError("a synced record cannot go back to unsynced")
        if int(patch.get("sync_attempts", self.sync_attempts)) < self.sync_attempts:
            raise ValidationError("sync_attempts cannot decrease")
        return dataclasses.replace(self, **patch)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "check_in_time": to_iso(self.check_in_time),
            "check_out_time": to_iso(self.check_out_time),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy_meters": self.accuracy_meters,
            "is_synced": self.is_synced,
            "sync_attempts": self.sync_attempts,
            "sync_error": self.sync_error,
            "created_at": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OfflineAttendanceRecord":
        try:
            return cls(
                id=str(data["id"]),
                employee_id=str(data["employee_id"]),
                date=parse_iso_date(data["date"]),
                check_in_time=parse_iso_datetime(data.get("check_in_time")),
                check_out_time=parse_iso_datetime(data.get("check_out_time")),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                accuracy_meters=data.get("accuracy_meters"),
                is_synced=bool(data.get("is_synced", False)),
                sync_attempts=int(data.get("sync_attempts", 0)),
                sync_error=data.get("sync_error"),
                created_at=parse_iso_datetime(data["created_at"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"invalid stored record: {exc}") from exc
