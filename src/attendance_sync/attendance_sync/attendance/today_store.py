from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, to_iso
from ..core.constants import TODAY_STORAGE_KEY
from ..storage.repository import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodaysAttendance:
    employee_id: str
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime] = None


class TodaysAttendanceStore:
    """Last check-in/check-out per employee, so a check-out knows its check-in offline.

    An unreadable value is discarded; the offline queue stays the source of truth.
    """

    def __init__(self, storage: KeyValueStorage, *, storage_key: str = TODAY_STORAGE_KEY):
        self._storage = storage
        self._key = storage_key

    def _read(self) -> dict:
        raw = self._storage.get_item(self._key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable today's attendance store", exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Discarding today's attendance store of type %s", type(data).__name__)
            return {}
        return data

    def get(self, employee_id: str, work_date: date) -> Optional[TodaysAttendance]:
        item = self._read().get(employee_id)
        if not isinstance(item, dict) or item.get("date") != work_date.isoformat():
            return None
        try:
            return TodaysAttendance(
                employee_id=employee_id,
                work_date=parse_iso_date(item["date"]),
                check_in_time=parse_iso_datetime(item["check_in_time"]),
                check_out_time=parse_iso_datetime(item.get("check_out_time")),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable today's attendance for %s", employee_id, exc_info=True)
            return None

    def save(self, entry: TodaysAttendance) -> None:
        data = self._read()
        data[entry.employee_id] = {
            "date": entry.work_date.isoformat(),
            "check_in_time": to_iso(entry.check_in_time),
            "check_out_time": to_iso(entry.check_out_time),
        }
        self._storage.set_item(self._key, json.dumps(data))
