from __future__ import annotations

import requests

from src.attendance_sync.attendance_sync.connectivity.monitor import ConnectivityMonitor
from src.attendance_sync.attendance_sync.connectivity.probe import HttpConnectivityProbe


class FakeProbe:
    def __init__(self, results):
        self._results = list(results)

    def check(self) -> bool:
        return self._results.pop(0)


class FakeSession:
    def __init__(self, error=None):
        self._error = error
        self.calls = []

    def head(self, url, timeout, allow_redirects):
        self.calls.append((url, timeout))
        if self._error:
            raise self._error
        return object()


def test_defaults_to_online():
    assert ConnectivityMonitor().is_online is True


def test_each_subscriber_notified_once_per_transition():
    monitor = ConnectivityMonitor()
    a, b = [], []
    monitor.subscribe(a.append)
    monitor.subscribe(b.append)

    monitor.set_online(False)
    monitor.set_online(False)
    monitor.set_online(True)
    monitor.set_online(True)
    monitor.set_online(True)

    assert a == [False, True]
    assert b == [False, True]


def test_no_event_without_change():
    monitor = ConnectivityMonitor()
    events = []
    monitor.subscribe(events.append)

    assert monitor.set_online(True) is False
    assert events == []


def test_failing_listener_does_not_block_others():
    monitor = ConnectivityMonitor(initial_online=False)
    events = []

    def broken(online):
        raise RuntimeError("boom")

    monitor.subscribe(broken)
    monitor.subscribe(events.append)
    monitor.set_online(True)

    assert events == [True]
    assert monitor.is_online is True


def test_unsubscribe_stops_events_and_is_idempotent():
    monitor = ConnectivityMonitor()
    events = []
    unsubscribe = monitor.subscribe(events.append)

    unsubscribe()
    unsubscribe()
    monitor.set_online(False)

    assert events == []


def test_poll_applies_probe_result():
    monitor = ConnectivityMonitor(probe=FakeProbe([False, True]))
    events = []
    monitor.subscribe(events.append)

    assert monitor.poll() is False
    assert monitor.poll() is True
    assert events == [False, True]


def test_poll_without_probe_keeps_state():
    monitor = ConnectivityMonitor(initial_online=False)
    assert monitor.poll() is False


def test_http_probe_online_on_any_answer():
    session = FakeSession()
    probe = HttpConnectivityProbe("http://api.test/api", timeout=1.5, session=session)

    assert probe.check() is True
    assert session.calls == [("http://api.test/api", 1.5)]


def test_http_probe_offline_on_connection_error():
    probe = HttpConnectivityProbe("http://api.test/api", session=FakeSession(requests.ConnectionError("down")))
    assert probe.check() is False
