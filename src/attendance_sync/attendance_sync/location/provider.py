from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Protocol

from ..geo.model import PositionFix

logger = logging.getLogger(__name__)

FixHandler = Callable[[PositionFix], None]


class LocationProvider(Protocol):
    """Port over the platform location service."""

    def has_permission(self) -> bool:
        raise NotImplementedError

    def request_permission(self) -> bool:
        raise NotImplementedError

    def current_position(self, *, timeout: float) -> Optional[PositionFix]:
        """Return a fresh fix, or raise ``TimeoutError`` when none arrives in time."""

        raise NotImplementedError

    def subscribe(self, handler: FixHandler) -> Callable[[], None]:
        """Push every new fix to ``handler`` until the returned callable is invoked."""

        raise NotImplementedError


class ManualLocationProvider(LocationProvider):
    """In-process provider fed by whoever owns the real receiver.

    Used by the scripts (coordinates from the command line) and by hosts where
    fixes arrive from another process.
    """

    def __init__(self, *, permission_granted: bool = True, fix: Optional[PositionFix] = None):
        self._permission_granted = permission_granted
        self._fix = fix
        self._handlers: List[FixHandler] = []
        self._lock = threading.Lock()
        self._fix_ready = threading.Condition(self._lock)

    def has_permission(self) -> bool:
        return self._permission_granted

    def request_permission(self) -> bool:
        return self._permission_granted

    def grant_permission(self, granted: bool = True) -> None:
        self._permission_granted = granted

    def current_position(self, *, timeout: float) -> Optional[PositionFix]:
        with self._fix_ready:
            if self._fix is None and not self._fix_ready.wait_for(lambda: self._fix is not None, timeout=timeout):
                raise TimeoutError(f"no position within {timeout}s")
            return self._fix

    def subscribe(self, handler: FixHandler) -> Callable[[], None]:
        with self._lock:
            self._handlers.append(handler)

        def cancel() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return cancel

    def push(self, fix: PositionFix) -> None:
        """Record a new fix and deliver it to subscribers."""
        with self._fix_ready:
            self._fix = fix
            self._fix_ready.notify_all()
            handlers = list(self._handlers)
        for handler in handlers:
            handler(fix)
