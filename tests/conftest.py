from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.attendance_sync.attendance_sync.storage.sqlite_storage import SQLiteKeyValueStorage


@pytest.fixture
def fixed_now() -> datetime:
    # 08:25 in Nairobi (UTC+3)
    return datetime(2026, 2, 2, 5, 25, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    s = SQLiteKeyValueStorage(":memory:")
    yield s
    s.close()


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "device" / "attendance.sqlite3"
