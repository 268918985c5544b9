from __future__ import annotations

import dataclasses
import json
import logging
import threading
from datetime import datetime
from typing import Any, List, Optional

from ..core.constants import QUEUE_STORAGE_KEY
from ..core.exceptions import ValidationError
from ..storage.repository import KeyValueStorage
from .model import OfflineAttendanceRecord

logger = logging.getLogger(__name__)


class OfflineAttendanceQueue:
    """FIFO of attendance records waiting for the server.

    The stored JSON document is the source of truth; the in-memory list is a
    cache of it. ``load()`` must run before any mutation, and every mutation
    rewrites the whole document in one storage write.
    """

    def __init__(self, storage: KeyValueStorage, *, storage_key: str = QUEUE_STORAGE_KEY):
        self._storage = storage
        self._key = storage_key
        self._records: List[OfflineAttendanceRecord] = []
        self._loaded = False
        self._lock = threading.RLock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> List[OfflineAttendanceRecord]:
        with self._lock:
            raw = self._storage.get_item(self._key)
            records: List[OfflineAttendanceRecord] = []
            if raw:
                try:
                    items = json.loads(raw)
                except ValueError as exc:
                    raise ValidationError(f"stored queue is not valid JSON: {exc}") from exc
                records = [OfflineAttendanceRecord.from_dict(item) for item in items]
            self._records = records
            self._loaded = True
            logger.info("Loaded %d offline attendance record(s)", len(records))
            return list(records)

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("OfflineAttendanceQueue.load() must be called before use")

    def _persist(self, records: List[OfflineAttendanceRecord]) -> None:
        # Write first, swap the cache only once the write is durable.
        payload = json.dumps([r.to_dict() for r in records])
        self._storage.set_item(self._key, payload)
        self._records = records

    def enqueue(self, record: OfflineAttendanceRecord) -> OfflineAttendanceRecord:
        with self._lock:
            self._require_loaded()
            if any(r.id == record.id for r in self._records):
                raise ValidationError(f"record {record.id} already queued")
            if record.is_synced:
                record = dataclasses.replace(record, is_synced=False)
            self._persist(self._records + [record])
            logger.info("Queued attendance %s for employee %s", record.id, record.employee_id)
            return record

    def update_record(self, record_id: str, **patch: Any) -> Optional[OfflineAttendanceRecord]:
        """Merge ``patch`` into the record. Returns None when the id is unknown."""
        with self._lock:
            self._require_loaded()
            for index, current in enumerate(self._records):
                if current.id == record_id:
                    updated = current.with_changes(**patch)
                    records = list(self._records)
                    records[index] = updated
                    self._persist(records)
                    return updated
            return None

    def remove_record(self, record_id: str) -> bool:
        with self._lock:
            self._require_loaded()
            records = [r for r in self._records if r.id != record_id]
            if len(records) == len(self._records):
                return False
            self._persist(records)
            return True

    def clear(self) -> None:
        with self._lock:
            self._require_loaded()
            self._persist([])
            logger.info("Cleared offline attendance queue")

    def get(self, record_id: str) -> Optional[OfflineAttendanceRecord]:
        with self._lock:
            self._require_loaded()
            return next((r for r in self._records if r.id == record_id), None)

    def list_pending(self) -> List[OfflineAttendanceRecord]:
        with self._lock:
            self._require_loaded()
            return [r for r in self._records if not r.is_synced]

    def list_all(self) -> List[OfflineAttendanceRecord]:
        with self._lock:
            self._require_loaded()
            return list(self._records)

    def created_before(self, cutoff: datetime) -> List[OfflineAttendanceRecord]:
        return [r for r in self.list_pending() if r.created_at < cutoff]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
