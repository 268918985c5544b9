from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from .probe import ConnectivityProbe

logger = logging.getLogger(__name__)

ConnectivityListener = Callable[[bool], None]


class ConnectivityMonitor:
    """Boolean online signal plus a stream of transitions.

    Starts online until the platform says otherwise. Listeners run once per
    actual change of state, in subscription order, outside the state lock.
    """

    def __init__(self, *, initial_online: bool = True, probe: Optional[ConnectivityProbe] = None):
        self._online = bool(initial_online)
        self._probe = probe
        self._listeners: List[ConnectivityListener] = []
        self._lock = threading.Lock()

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_online(self, online: bool) -> bool:
        """Apply a platform signal. Returns True when the state changed."""
        online = bool(online)
        with self._lock:
            if online == self._online:
                return False
            self._online = online
            listeners = list(self._listeners)

        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in listeners:
            try:
                listener(online)
            except Exception:
                logger.exception("Connectivity listener %r failed", listener)
        return True

    def poll(self) -> bool:
        """Ask the probe for the current state and apply it."""
        if self._probe is None:
            return self._online
        self.set_online(self._probe.check())
        return self._online
