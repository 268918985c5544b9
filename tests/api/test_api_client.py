from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest
import requests

from src.attendance_sync.attendance_sync.api.attendance_api import AttendanceApi, attendance_payload
from src.attendance_sync.attendance_sync.api.client import ApiClient
from src.attendance_sync.attendance_sync.api.schemas import GeofenceVerificationResponse, SiteSchema, parse_response
from src.attendance_sync.attendance_sync.core.exceptions import (
    MalformedResponse,
    NetworkUnavailable,
    RequestFailed,
    ServerRejected,
)
from src.attendance_sync.attendance_sync.geo.model import PositionFix
from src.attendance_sync.attendance_sync.offline.model import OfflineAttendanceRecord


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        if text is None:
            text = "" if body is None else json.dumps(body)
        self.text = text
        self.content = text.encode()

    def json(self):
        return json.loads(self.text)


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.responses = list(responses or [])
        self.error = error
        self.requests = []
        self.closed = False

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    def close(self):
        self.closed = True


def make_client(session, **kwargs):
    return ApiClient("http://testserver/", token="tok", device_id="dev-1", app_version="1.2.0", session=session, **kwargs)


def make_record(**kwargs):
    return OfflineAttendanceRecord(
        employee_id="EMP-001",
        date=date(2026, 2, 2),
        check_in_time=datetime(2026, 2, 2, 5, 25, tzinfo=timezone.utc),
        **kwargs,
    )


def test_headers_and_url():
    session = FakeSession([FakeResponse(200, {"ok": True})])
    client = make_client(session)

    assert client.get("/attendance/offline/") == {"ok": True}

    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "http://testserver/api/attendance/offline/"
    assert sent["timeout"] == 30.0
    assert session.headers["Authorization"] == "Bearer tok"
    assert session.headers["X-Device-Id"] == "dev-1"
    assert session.headers["X-App-Version"] == "1.2.0"
    assert session.headers["Content-Type"] == "application/json"


def test_post_sends_json_and_per_call_timeout():
    session = FakeSession([FakeResponse(201, {"id": 9})])
    client = make_client(session, timeout=12)

    client.post("attendance/verify-geofence/", {"latitude": 1.0}, timeout=8)

    sent = session.requests[0]
    assert sent["json"] == {"latitude": 1.0}
    assert sent["timeout"] == 8.0


def test_transport_error_maps_to_network_unavailable():
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(NetworkUnavailable):
        make_client(session).get("/x/")


def test_timeout_maps_to_network_unavailable():
    session = FakeSession(error=requests.Timeout("slow"))
    with pytest.raises(NetworkUnavailable):
        make_client(session).get("/x/")


def test_client_error_carries_detail():
    session = FakeSession([FakeResponse(400, {"detail": "Already checked in"})])

    with pytest.raises(ServerRejected) as excinfo:
        make_client(session).post("/attendance/offline/", {})

    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Already checked in"
    assert str(excinfo.value) == "HTTP 400: Already checked in"


def test_server_error_maps_to_request_failed():
    session = FakeSession([FakeResponse(503, text="Service Unavailable")])

    with pytest.raises(RequestFailed) as excinfo:
        make_client(session).get("/x/")

    assert not isinstance(excinfo.value, ServerRejected)
    assert excinfo.value.status_code == 503


def test_empty_body_is_empty_dict():
    session = FakeSession([FakeResponse(204)])
    assert make_client(session).post("/x/", {}) == {}


def test_non_json_body_is_malformed():
    session = FakeSession([FakeResponse(200, text="<html>")])
    with pytest.raises(MalformedResponse):
        make_client(session).get("/x/")


def test_close_closes_session():
    session = FakeSession()
    make_client(session).close()
    assert session.closed


def test_verification_schema_accepts_aliases():
    response = parse_response(
        GeofenceVerificationResponse,
        {"isWithinGeofence": True, "distance_meters": 12.5, "branch": {"id": 7, "latitude": 0, "longitude": 0, "radius": 50}},
    )

    assert response.is_within_geofence is True
    assert response.distance == 12.5
    assert response.site.id == "7"
    assert response.site.radius_meters == 50


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"is_within_geofence": "maybe"},
        {"is_within_geofence": True, "distance": -1},
        {"is_within_geofence": True, "site": {"id": "1", "latitude": 91, "longitude": 0, "radius": 10}},
        ["not", "an", "object"],
    ],
)
def test_malformed_verification_rejected(payload):
    with pytest.raises(MalformedResponse):
        parse_response(GeofenceVerificationResponse, payload)


def test_site_schema_requires_radius():
    with pytest.raises(MalformedResponse):
        parse_response(SiteSchema, {"id": "1", "latitude": 0, "longitude": 0})


def test_verify_geofence_posts_fix():
    session = FakeSession([FakeResponse(200, {"is_within_geofence": False, "distance": 500})])
    api = AttendanceApi(make_client(session))

    response = api.verify_geofence(PositionFix(latitude=-1.29, longitude=36.82, accuracy_meters=15), timeout=8)

    sent = session.requests[0]
    assert sent["url"].endswith("/api/attendance/verify-geofence/")
    assert sent["json"] == {"latitude": -1.29, "longitude": 36.82, "accuracy": 15.0}
    assert sent["timeout"] == 8.0
    assert response.is_within_geofence is False
    assert response.distance == 500


def test_submit_attendance_posts_record():
    record = make_record(latitude=-1.29, longitude=36.82)
    session = FakeSession([FakeResponse(201, {"id": 42, "client_id": record.id})])
    api = AttendanceApi(make_client(session))

    response = api.submit_attendance(record)

    sent = session.requests[0]
    assert sent["url"].endswith("/api/attendance/offline/")
    assert sent["json"]["client_id"] == record.id
    assert response.id == "42"


def test_fetch_branch_geofence():
    session = FakeSession([FakeResponse(200, {"id": 3, "name": "Kisumu", "latitude": -0.09, "longitude": 34.77, "radius": 80})])
    api = AttendanceApi(make_client(session))

    site = api.fetch_branch_geofence("3")

    assert session.requests[0]["url"].endswith("/api/organizations/branches/3/geofence/")
    assert site.id == "3"
    assert site.radius_meters == 80


def test_attendance_payload_drops_missing_fields():
    record = make_record()

    assert attendance_payload(record) == {
        "client_id": record.id,
        "employee_id": "EMP-001",
        "date": "2026-02-02",
        "check_in_time": "2026-02-02T05:25:00+00:00",
    }
