from __future__ import annotations

import pytest

from src.attendance_sync.attendance_sync.storage.sqlite_storage import SQLiteKeyValueStorage


def test_set_get_remove(storage):
    assert storage.get_item("k") is None

    storage.set_item("k", "v1")
    storage.set_item("k", "v2")
    assert storage.get_item("k") == "v2"

    storage.remove_item("k")
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_values_survive_reopen(storage_path):
    first = SQLiteKeyValueStorage(storage_path)
    first.set_item("queue", '[{"id": "a"}]')
    first.close()

    second = SQLiteKeyValueStorage(storage_path)
    try:
        assert second.get_item("queue") == '[{"id": "a"}]'
    finally:
        second.close()


def test_failed_transaction_rolls_back(storage):
    storage.set_item("k", "before")

    with pytest.raises(RuntimeError):
        with storage.db_cursor() as (_, cur):
            cur.execute("UPDATE kv_store SET value = 'after' WHERE key = 'k'")
            raise RuntimeError("crash mid-write")

    assert storage.get_item("k") == "before"


def test_closed_storage_rejects_use(storage_path):
    s = SQLiteKeyValueStorage(storage_path)
    s.close()
    s.close()

    with pytest.raises(RuntimeError):
        s.get_item("k")
