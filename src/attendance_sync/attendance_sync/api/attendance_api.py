from __future__ import annotations

from typing import Optional

from ..geo.model import GeofenceSite, PositionFix
from ..offline.model import OfflineAttendanceRecord
from . import endpoints
from .client import ApiClient
from .schemas import AttendanceWriteResponse, GeofenceVerificationResponse, SiteSchema, parse_response


class AttendanceApi:
    """Remote attendance endpoints used by the sync subsystem."""

    def __init__(self, client: ApiClient):
        self._client = client

    def verify_geofence(self, fix: PositionFix, *, timeout: Optional[float] = None) -> GeofenceVerificationResponse:
        payload = {
            "latitude": fix.latitude,
            "longitude": fix.longitude,
            "accuracy": fix.accuracy_meters,
        }
        body = self._client.post(endpoints.ATTENDANCE_VERIFY_GEOFENCE, payload, timeout=timeout)
        return parse_response(GeofenceVerificationResponse, body)

    def submit_attendance(self, record: OfflineAttendanceRecord) -> AttendanceWriteResponse:
        """Write one record. ``client_id`` lets the server drop re-submissions."""
        body = self._client.post(endpoints.ATTENDANCE_OFFLINE, attendance_payload(record))
        return parse_response(AttendanceWriteResponse, body)

    def fetch_branch_geofence(self, branch_id: str) -> GeofenceSite:
        body = self._client.get(endpoints.branch_geofence(branch_id))
        return parse_response(SiteSchema, body).to_site()


def attendance_payload(record: OfflineAttendanceRecord) -> dict:
    payload = {
        "client_id": record.id,
        "employee_id": record.employee_id,
        "date": record.date.isoformat(),
        "check_in_time": record.check_in_time.isoformat() if record.check_in_time else None,
        "check_out_time": record.check_out_time.isoformat() if record.check_out_time else None,
        "latitude": record.latitude,
        "longitude": record.longitude,
        "accuracy": record.accuracy_meters,
    }
    return {key: value for key, value in payload.items() if value is not None}
