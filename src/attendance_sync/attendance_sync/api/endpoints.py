"""Paths of the remote attendance API, relative to ``<API_BASE_URL>/api``."""

ATTENDANCE_OFFLINE = "/attendance/offline/"
ATTENDANCE_VERIFY_GEOFENCE = "/attendance/verify-geofence/"


def branch_geofence(branch_id: str) -> str:
    return f"/organizations/branches/{branch_id}/geofence/"
