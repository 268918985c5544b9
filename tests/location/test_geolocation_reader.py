from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_sync.attendance_sync.core.exceptions import LocationUnavailable, PermissionDenied
from src.attendance_sync.attendance_sync.geo.model import PositionFix
from src.attendance_sync.attendance_sync.location.provider import ManualLocationProvider
from src.attendance_sync.attendance_sync.location.reader import GeolocationReader

T0 = datetime(2026, 2, 2, 5, 0, 0, tzinfo=timezone.utc)


def fix_at(lat: float, lng: float, seconds: float) -> PositionFix:
    return PositionFix(lat, lng, accuracy_meters=5.0, captured_at=T0 + timedelta(seconds=seconds))


class PermissionFlowProvider(ManualLocationProvider):
    """Permission missing at first, granted (or not) when asked."""

    def __init__(self, grant_on_request: bool, fix=None):
        super().__init__(permission_granted=False, fix=fix)
        self._grant_on_request = grant_on_request
        self.requests = 0

    def request_permission(self) -> bool:
        self.requests += 1
        self.grant_permission(self._grant_on_request)
        return self._grant_on_request


class BrokenProvider(ManualLocationProvider):
    def __init__(self, error=None, returns_none=False):
        super().__init__()
        self._error = error
        self._returns_none = returns_none

    def current_position(self, *, timeout: float):
        if self._error:
            raise self._error
        return None


def test_get_current_fix_returns_provider_fix():
    fix = fix_at(-1.2921, 36.8219, 0)
    reader = GeolocationReader(ManualLocationProvider(fix=fix))

    assert reader.get_current_fix() == fix
    assert reader.last_fix == fix


def test_permission_requested_when_missing():
    provider = PermissionFlowProvider(grant_on_request=True, fix=fix_at(0, 0, 0))
    reader = GeolocationReader(provider)

    reader.get_current_fix()
    assert provider.requests == 1


def test_permission_refused_raises():
    provider = PermissionFlowProvider(grant_on_request=False, fix=fix_at(0, 0, 0))
    reader = GeolocationReader(provider)

    with pytest.raises(PermissionDenied):
        reader.get_current_fix()


def test_timeout_raises_location_unavailable():
    reader = GeolocationReader(ManualLocationProvider(fix=None), timeout_seconds=0.01)

    with pytest.raises(LocationUnavailable):
        reader.get_current_fix()


@pytest.mark.parametrize(
    "provider",
    [BrokenProvider(error=OSError("gps off")), BrokenProvider(returns_none=True)],
)
def test_provider_failures_raise_location_unavailable(provider):
    with pytest.raises(LocationUnavailable):
        GeolocationReader(provider).get_current_fix(timeout=0.01)


def test_watch_filters_by_distance_and_interval():
    provider = ManualLocationProvider()
    received = []
    reader = GeolocationReader(provider)
    reader.watch(received.append, min_distance_meters=10, min_interval_seconds=30)

    first = fix_at(-1.29210, 36.8219, 0)
    provider.push(first)
    provider.push(fix_at(-1.29300, 36.8219, 5))  # ~100 m but too soon
    provider.push(fix_at(-1.29211, 36.8219, 60))  # late enough but ~1 m
    moved = fix_at(-1.29300, 36.8219, 60)
    provider.push(moved)

    assert received == [first, moved]
    assert reader.last_fix == moved


def test_unsubscribe_is_idempotent_and_stops_callbacks():
    provider = ManualLocationProvider()
    received = []
    subscription = GeolocationReader(provider).watch(received.append, min_distance_meters=0, min_interval_seconds=0)

    provider.push(fix_at(0, 0, 0))
    subscription()
    subscription()
    subscription.cancel()
    provider.push(fix_at(1, 1, 100))

    assert len(received) == 1
    assert subscription.active is False


def test_watch_requires_permission():
    provider = PermissionFlowProvider(grant_on_request=False)

    with pytest.raises(PermissionDenied):
        GeolocationReader(provider).watch(lambda fix: None)


def test_failing_callback_does_not_end_watch():
    provider = ManualLocationProvider()
    calls = []

    def callback(fix):
        calls.append(fix)
        raise RuntimeError("ui crashed")

    GeolocationReader(provider).watch(callback, min_distance_meters=0, min_interval_seconds=0)
    provider.push(fix_at(0, 0, 0))
    provider.push(fix_at(0, 0, 1))

    assert len(calls) == 2


def test_watch_uses_reader_thresholds_by_default():
    provider = ManualLocationProvider()
    received = []
    GeolocationReader(provider, watch_min_distance_meters=0, watch_min_interval_seconds=0).watch(received.append)

    a = fix_at(-1.29210, 36.8219, 0)
    b = fix_at(-1.29210, 36.8219, 1)
    provider.push(a)
    provider.push(b)

    assert received == [a, b]
