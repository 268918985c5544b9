from __future__ import annotations

from enum import Enum


class VerdictSource(str, Enum):
    """Where a geofence verdict came from."""

    SERVER = "server"
    CACHE = "cache"
    FALLBACK = "fallback"


class SyncState(str, Enum):
    """Per-record state inside the sync engine."""

    PENDING = "PENDING"
    SYNCING = "SYNCING"
    SYNCED = "SYNCED"


class PunchType(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
