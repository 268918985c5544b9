from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..connectivity.monitor import ConnectivityMonitor
from ..core.enums import PunchType
from ..core.exceptions import RemoteError, ValidationError
from ..geo.model import GeofenceSite, GeofenceVerdict, PositionFix
from ..geofence.service import GeofenceVerifier
from ..location.reader import GeolocationReader
from ..offline.model import OfflineAttendanceRecord
from ..offline.queue import OfflineAttendanceQueue
from ..sync.engine import AttendanceWriter
from .today_store import TodaysAttendance, TodaysAttendanceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    punch_type: PunchType
    record: OfflineAttendanceRecord
    verdict: GeofenceVerdict
    synced: bool

    @property
    def queued(self) -> bool:
        return not self.synced


class AttendanceService:
    """Use case: check in / check out.

    Capture always succeeds locally once a fix is available: the record is
    written to the server when possible and queued otherwise. Location errors
    (``PermissionDenied``, ``LocationUnavailable``) propagate to the caller.
    """

    def __init__(
        self,
        reader: GeolocationReader,
        verifier: GeofenceVerifier,
        queue: OfflineAttendanceQueue,
        remote: AttendanceWriter,
        connectivity: ConnectivityMonitor,
        today: TodaysAttendanceStore,
        *,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._reader = reader
        self._verifier = verifier
        self._queue = queue
        self._remote = remote
        self._connectivity = connectivity
        self._today = today
        self._tz = tz
        self._clock = clock

    def todays_attendance(self, employee_id: str) -> Optional[TodaysAttendance]:
        return self._today.get(employee_id, self._clock().astimezone(self._tz).date())

    def check_in(self, employee_id: str, *, candidate_sites: Optional[Sequence[GeofenceSite]] = None) -> CheckResult:
        employee_id = require_non_empty(employee_id, "employee_id")
        now = self._clock()
        work_date = now.astimezone(self._tz).date()

        if self._today.get(employee_id, work_date):
            raise ValidationError("Already checked in today")

        fix, verdict = self._locate(candidate_sites)
        record = _new_record(employee_id, work_date, fix, check_in_time=now)
        synced = self._write_or_queue(record)

        self._today.save(TodaysAttendance(employee_id=employee_id, work_date=work_date, check_in_time=now))
        return CheckResult(punch_type=PunchType.CHECK_IN, record=record, verdict=verdict, synced=synced)

    def check_out(self, employee_id: str, *, candidate_sites: Optional[Sequence[GeofenceSite]] = None) -> CheckResult:
        employee_id = require_non_empty(employee_id, "employee_id")
        now = self._clock()
        work_date = now.astimezone(self._tz).date()

        entry = self._today.get(employee_id, work_date)
        if entry is None:
            raise ValidationError("No check-in recorded today")
        if entry.check_out_time is not None:
            raise ValidationError("Already checked out today")

        fix, verdict = self._locate(candidate_sites)
        # A separate record carrying both times; the queued check-in may be mid-sync.
        record = _new_record(employee_id, work_date, fix, check_in_time=entry.check_in_time, check_out_time=now)
        synced = self._write_or_queue(record)

        self._today.save(dataclasses.replace(entry, check_out_time=now))
        return CheckResult(punch_type=PunchType.CHECK_OUT, record=record, verdict=verdict, synced=synced)

    def _locate(self, candidate_sites: Optional[Sequence[GeofenceSite]]):
        fix = self._reader.get_current_fix()
        verdict = self._verifier.verify(fix, candidate_sites)
        if not verdict.within_bounds:
            logger.warning(
                "Attendance captured outside geofence (%s, distance=%s)",
                verdict.source.value,
                verdict.distance_meters,
            )
        return fix, verdict

    def _write_or_queue(self, record: OfflineAttendanceRecord) -> bool:
        if self._connectivity.is_online:
            try:
                self._remote.submit_attendance(record)
            except RemoteError as exc:
                logger.warning("Attendance write failed, queueing %s: %s", record.id, exc)
            else:
                logger.info("Attendance %s written for employee %s", record.id, record.employee_id)
                return True
        self._queue.enqueue(record)
        return False


def _new_record(
    employee_id: str,
    work_date,
    fix: PositionFix,
    *,
    check_in_time: datetime,
    check_out_time: Optional[datetime] = None,
) -> OfflineAttendanceRecord:
    return OfflineAttendanceRecord(
        employee_id=employee_id,
        date=work_date,
        check_in_time=check_in_time,
        check_out_time=check_out_time,
        latitude=fix.latitude,
        longitude=fix.longitude,
        accuracy_meters=fix.accuracy_meters,
    )
