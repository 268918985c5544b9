from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.constants import (
    DEFAULT_LOCATION_TIMEOUT_SECONDS,
    DEFAULT_WATCH_MIN_DISTANCE_METERS,
    DEFAULT_WATCH_MIN_INTERVAL_SECONDS,
)
from ..core.exceptions import LocationUnavailable, PermissionDenied
from ..geo.distance import haversine_distance_meters
from ..geo.model import PositionFix
from .provider import LocationProvider

logger = logging.getLogger(__name__)


class WatchSubscription:
    """Handle returned by ``GeolocationReader.watch``.

    Calling it (or ``cancel()``) any number of times stops the watch; no
    callback runs after the first call returns.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active = True
        self._cancel_provider: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self._active

    def _bind(self, cancel_provider: Callable[[], None]) -> None:
        self._cancel_provider = cancel_provider

    def cancel(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
            cancel_provider, self._cancel_provider = self._cancel_provider, None
        if cancel_provider is not None:
            cancel_provider()

    __call__ = cancel


class GeolocationReader:
    def __init__(
        self,
        provider: LocationProvider,
        *,
        timeout_seconds: float = DEFAULT_LOCATION_TIMEOUT_SECONDS,
        watch_min_distance_meters: float = DEFAULT_WATCH_MIN_DISTANCE_METERS,
        watch_min_interval_seconds: float = DEFAULT_WATCH_MIN_INTERVAL_SECONDS,
    ):
        self._provider = provider
        self._timeout = float(timeout_seconds)
        self._watch_min_distance = float(watch_min_distance_meters)
        self._watch_min_interval = float(watch_min_interval_seconds)
        self.last_fix: Optional[PositionFix] = None

    def _ensure_permission(self) -> None:
        if self._provider.has_permission():
            return
        if not self._provider.request_permission():
            logger.warning("Location permission denied")
            raise PermissionDenied("Location permission required")

    def get_current_fix(self, *, timeout: Optional[float] = None) -> PositionFix:
        self._ensure_permission()
        timeout = self._timeout if timeout is None else float(timeout)

        try:
            fix = self._provider.current_position(timeout=timeout)
        except TimeoutError as exc:
            raise LocationUnavailable(f"No location fix within {timeout}s") from exc
        except OSError as exc:
            raise LocationUnavailable(f"Location provider failed: {exc}") from exc

        if fix is None:
            raise LocationUnavailable("Location provider returned no fix")

        self.last_fix = fix
        return fix

    def watch(
        self,
        callback: Callable[[PositionFix], None],
        *,
        min_distance_meters: Optional[float] = None,
        min_interval_seconds: Optional[float] = None,
    ) -> WatchSubscription:
        """Invoke ``callback`` on every qualifying movement.

        The first fix is always delivered. After that a fix qualifies when it
        is at least ``min_distance_meters`` from the last delivered fix and
        at least ``min_interval_seconds`` later.
        """
        self._ensure_permission()
        if min_distance_meters is None:
            min_distance_meters = self._watch_min_distance
        if min_interval_seconds is None:
            min_interval_seconds = self._watch_min_interval

        subscription = WatchSubscription()
        delivered: list[PositionFix] = []

        def on_fix(fix: PositionFix) -> None:
            if not subscription.active:
                return
            if delivered:
                previous = delivered[-1]
                elapsed = (fix.captured_at - previous.captured_at).total_seconds()
                moved = haversine_distance_meters(previous.coordinates, fix.coordinates)
                if moved < min_distance_meters or elapsed < min_interval_seconds:
                    return
            delivered[:] = [fix]
            self.last_fix = fix
            try:
                callback(fix)
            except Exception:
                logger.exception("Location watch callback failed")

        subscription._bind(self._provider.subscribe(on_fix))
        return subscription
