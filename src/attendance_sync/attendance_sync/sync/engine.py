from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Protocol

from ..common.datetime_utils import now_utc
from ..connectivity.monitor import ConnectivityMonitor
from ..core.enums import SyncState
from ..core.exceptions import RemoteError
from ..offline.model import OfflineAttendanceRecord
from ..offline.queue import OfflineAttendanceQueue
from .backoff import ExponentialBackoff
from .model import SyncFailure, SyncReport

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class AttendanceWriter(Protocol):
    def submit_attendance(self, record: OfflineAttendanceRecord):
        raise NotImplementedError


class SyncEngine:
    """Drain the offline queue against the remote API.

    Per record: PENDING -> SYNCING -> SYNCED (removed from the queue), or back
    to PENDING with ``sync_attempts + 1`` and ``sync_error`` set. Records are
    never dropped for having failed too often; callers inspect
    ``sync_attempts``/``sync_error``/``created_at`` to alert a human.

    Automatic passes (reconnects and the retry timer) go through the backoff
    window; ``drain()`` called directly does not.
    """

    def __init__(
        self,
        queue: OfflineAttendanceQueue,
        remote: AttendanceWriter,
        connectivity: ConnectivityMonitor,
        *,
        backoff: Optional[ExponentialBackoff] = None,
        clock: Callable[[], datetime] = now_utc,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self._queue = queue
        self._remote = remote
        self._connectivity = connectivity
        self._backoff = backoff or ExponentialBackoff()
        self._clock = clock
        self._timer_factory = timer_factory
        self._drain_lock = threading.Lock()
        self._timer_lock = threading.Lock()
        self._retry_timer: Optional[threading.Timer] = None
        self._states: Dict[str, SyncState] = {}
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def backoff(self) -> ExponentialBackoff:
        return self._backoff

    @property
    def is_draining(self) -> bool:
        return self._drain_lock.locked()

    @property
    def retry_scheduled(self) -> bool:
        return self._retry_timer is not None

    def state_of(self, record_id: str) -> Optional[SyncState]:
        state = self._states.get(record_id)
        if state is SyncState.SYNCED:
            return state
        record = self._queue.get(record_id)
        if record is None:
            return None
        if state is not None:
            return state
        return SyncState.SYNCED if record.is_synced else SyncState.PENDING

    def attach(self, monitor: Optional[ConnectivityMonitor] = None) -> None:
        """Try a pass on every offline -> online transition."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = (monitor or self._connectivity).subscribe(self._on_connectivity_change)

    def detach(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        self._cancel_retry()

    def _on_connectivity_change(self, online: bool) -> None:
        if not online:
            return
        report = self.maybe_drain()
        if report.skipped and report.reason == "backoff":
            self._schedule_retry(self._backoff.next_attempt_at)
        logger.info(
            "Reconnect drain: %d synced, %d failed%s",
            len(report.succeeded),
            len(report.failed),
            f" (skipped: {report.reason})" if report.skipped else "",
        )

    def maybe_drain(self) -> SyncReport:
        """Drain only if the backoff window has passed."""
        if not self._backoff.is_due(self._clock()):
            return SyncReport.skip("backoff")
        return self.drain()

    def drain(self) -> SyncReport:
        if not self._drain_lock.acquire(blocking=False):
            logger.debug("Drain already in progress, skipping")
            return SyncReport.skip("in_progress")
        try:
            return self._drain_locked()
        finally:
            self._drain_lock.release()

    def _drain_locked(self) -> SyncReport:
        if not self._connectivity.is_online:
            return SyncReport.skip("offline")

        self._purge_synced()
        pending = self._queue.list_pending()
        if not pending:
            return SyncReport.skip("empty")

        logger.info("Draining %d offline attendance record(s)", len(pending))
        succeeded: List[str] = []
        failed: List[SyncFailure] = []

        for record in pending:
            error = self._sync_one(record)
            if error is None:
                succeeded.append(record.id)
            else:
                failed.append(SyncFailure(id=record.id, error=error))

        if failed and not succeeded:
            retry_at = self._backoff.record_failure(self._clock())
            logger.warning("Drain pass failed for all %d record(s), next automatic pass at %s", len(failed), retry_at.isoformat())
            self._schedule_retry(retry_at)
        elif succeeded:
            self._backoff.reset()
            if failed:
                self._schedule_retry(self._clock() + timedelta(seconds=self._backoff.delay_seconds(1)))
            else:
                self._cancel_retry()

        logger.info("Drain finished: %d synced, %d failed", len(succeeded), len(failed))
        return SyncReport(succeeded=succeeded, failed=failed)

    def _sync_one(self, record: OfflineAttendanceRecord) -> Optional[str]:
        """Returns None on success, the error text on a retryable failure."""
        self._states[record.id] = SyncState.SYNCING
        try:
            self._remote.submit_attendance(record)
        except RemoteError as exc:
            error = str(exc) or exc.__class__.__name__
            self._queue.update_record(
                record.id,
                sync_attempts=record.sync_attempts + 1,
                sync_error=error,
            )
            self._states[record.id] = SyncState.PENDING
            logger.warning("Sync failed for %s (attempt %d): %s", record.id, record.sync_attempts + 1, error)
            return error
        except Exception:
            self._states.pop(record.id, None)
            raise

        try:
            self._queue.update_record(record.id, is_synced=True, sync_error=None)
            self._queue.remove_record(record.id)
        except Exception:
            self._states.pop(record.id, None)
            raise
        self._states[record.id] = SyncState.SYNCED
        return None

    def _purge_synced(self) -> None:
        # A crash between marking and removing leaves a synced record behind.
        for record in self._queue.list_all():
            if record.is_synced:
                self._queue.remove_record(record.id)
        live = {record.id for record in self._queue.list_all()}
        self._states = {k: v for k, v in self._states.items() if k in live}

    def _schedule_retry(self, retry_at: Optional[datetime]) -> None:
        """One-shot timer for the next automatic pass, only while attached."""
        if retry_at is None:
            return
        with self._timer_lock:
            if self._unsubscribe is None:
                return
            if self._retry_timer is not None:
                self._retry_timer.cancel()
            delay = max(0.0, (retry_at - self._clock()).total_seconds())
            timer = self._timer_factory(delay, self._retry)
            timer.daemon = True
            self._retry_timer = timer
            timer.start()
        logger.debug("Next automatic drain in %.1fs", delay)

    def _cancel_retry(self) -> None:
        with self._timer_lock:
            timer, self._retry_timer = self._retry_timer, None
        if timer is not None:
            timer.cancel()

    def _retry(self) -> None:
        with self._timer_lock:
            self._retry_timer = None
        if not self._connectivity.is_online:
            # The next reconnect takes over.
            return
        report = self.maybe_drain()
        if report.skipped and report.reason == "backoff":
            self._schedule_retry(self._backoff.next_attempt_at)

    def stale_records(self, older_than: timedelta) -> List[OfflineAttendanceRecord]:
        """Queued records created more than ``older_than`` ago."""
        return self._queue.created_before(self._clock() - older_than)
