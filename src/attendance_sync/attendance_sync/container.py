from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo

import requests

from .api.attendance_api import AttendanceApi
from .api.client import ApiClient
from .attendance.service import AttendanceService
from .attendance.today_store import TodaysAttendanceStore
from .connectivity.monitor import ConnectivityMonitor
from .connectivity.probe import ConnectivityProbe, HttpConnectivityProbe
from .geofence.service import GeofenceVerifier
from .geofence.site_cache import KeyValueSiteCache
from .location.provider import LocationProvider, ManualLocationProvider
from .location.reader import GeolocationReader
from .offline.queue import OfflineAttendanceQueue
from .storage.repository import KeyValueStorage
from .storage.sqlite_storage import SQLiteKeyValueStorage
from .sync.backoff import ExponentialBackoff
from .sync.engine import SyncEngine


@dataclass(frozen=True)
class Container:
    storage: KeyValueStorage
    api_client: ApiClient
    attendance_api: AttendanceApi

    location_provider: LocationProvider
    reader: GeolocationReader
    connectivity: ConnectivityMonitor
    site_cache: KeyValueSiteCache
    verifier: GeofenceVerifier
    queue: OfflineAttendanceQueue
    sync_engine: SyncEngine
    attendance_service: AttendanceService

    def start(self) -> None:
        """Load persisted state, then start reacting to connectivity."""
        self.queue.load()
        self.sync_engine.attach(self.connectivity)
        if self.connectivity.is_online and len(self.queue):
            self.sync_engine.drain()

    def shutdown(self) -> None:
        self.sync_engine.detach()
        self.verifier.close()
        self.api_client.close()
        self.storage.close()

    def __enter__(self) -> "Container":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


def _setting(settings: Any, name: str, default: Any = None) -> Any:
    if isinstance(settings, dict):
        return settings.get(name, default)
    return getattr(settings, name, default)


def build_container(
    *,
    settings: Union[ModuleType, dict, Any],
    location_provider: Optional[LocationProvider] = None,
    storage: Optional[KeyValueStorage] = None,
    session: Optional[requests.Session] = None,
    probe: Optional[ConnectivityProbe] = None,
) -> Container:
    storage = storage or SQLiteKeyValueStorage(_setting(settings, "STORAGE_PATH", ":memory:"))

    api_client = ApiClient(
        str(_setting(settings, "API_BASE_URL")),
        token=_setting(settings, "API_TOKEN"),
        device_id=_setting(settings, "DEVICE_ID"),
        app_version=_setting(settings, "APP_VERSION"),
        timeout=float(_setting(settings, "API_TIMEOUT_SECONDS", 30.0)),
        session=session,
    )
    attendance_api = AttendanceApi(api_client)

    location_provider = location_provider or ManualLocationProvider()
    reader = GeolocationReader(
        location_provider,
        timeout_seconds=float(_setting(settings, "LOCATION_TIMEOUT_SECONDS", 15.0)),
        watch_min_distance_meters=float(_setting(settings, "WATCH_MIN_DISTANCE_METERS", 10.0)),
        watch_min_interval_seconds=float(_setting(settings, "WATCH_MIN_INTERVAL_SECONDS", 30.0)),
    )

    probe = probe or HttpConnectivityProbe(api_client.base_url, session=session)
    connectivity = ConnectivityMonitor(initial_online=True, probe=probe)

    site_cache = KeyValueSiteCache(storage)
    verifier = GeofenceVerifier(
        attendance_api,
        site_cache,
        connectivity,
        timeout_seconds=float(_setting(settings, "GEOFENCE_TIMEOUT_SECONDS", 8.0)),
        assume_within_on_failure=bool(_setting(settings, "ASSUME_WITHIN_GEOFENCE_ON_FAILURE", True)),
    )

    queue = OfflineAttendanceQueue(storage)
    sync_engine = SyncEngine(
        queue,
        attendance_api,
        connectivity,
        backoff=ExponentialBackoff(
            base_seconds=float(_setting(settings, "SYNC_BACKOFF_BASE_SECONDS", 5.0)),
            max_seconds=float(_setting(settings, "SYNC_BACKOFF_MAX_SECONDS", 300.0)),
        ),
    )
    attendance_service = AttendanceService(
        reader,
        verifier,
        queue,
        attendance_api,
        connectivity,
        TodaysAttendanceStore(storage),
        tz=ZoneInfo(str(_setting(settings, "TIMEZONE", "Africa/Nairobi"))),
    )

    return Container(
        storage=storage,
        api_client=api_client,
        attendance_api=attendance_api,
        location_provider=location_provider,
        reader=reader,
        connectivity=connectivity,
        site_cache=site_cache,
        verifier=verifier,
        queue=queue,
        sync_engine=sync_engine,
        attendance_service=attendance_service,
    )
