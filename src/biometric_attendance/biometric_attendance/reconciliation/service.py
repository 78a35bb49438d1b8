from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, Optional, TypeVar

from ..attendance.model import AttendanceRecord
from ..attendance.summary import WorkPeriods
from ..common.validators import require_bool, require_employee_code, require_scan_timestamp
from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BACKOFF_SECONDS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from .engine import UNCHANGED, ReconciliationEngine
from .model import ScanResult, SyncReport
from .retry import run_with_retry
from .sync import BulkSyncJob
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AttendanceScanService:
    """Entry point for scan ingestion and attendance maintenance.

    Each call is one transaction; lock and deadlock conflicts are retried with
    exponential backoff before surfacing as ConcurrencyConflict.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        engine: ReconciliationEngine,
        sync_job: BulkSyncJob,
        *,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._uow_factory = uow_factory
        self._engine = engine
        self._sync_job = sync_job
        self._retry_attempts = int(retry_attempts)
        self._retry_backoff_seconds = float(retry_backoff_seconds)
        self._sleep = sleep

    def _transact(self, work: Callable[[UnitOfWork], T]) -> T:
        def attempt() -> T:
            with self._uow_factory() as uow:
                return work(uow)

        return run_with_retry(
            attempt,
            attempts=self._retry_attempts,
            backoff_seconds=self._retry_backoff_seconds,
            sleep=self._sleep,
        )

    # ----- scans -----

    def record_scan(self, employee_code: str, timestamp) -> ScanResult:
        code = require_employee_code(employee_code)
        ts = require_scan_timestamp(timestamp)

        def work(uow: UnitOfWork) -> ScanResult:
            scan = uow.scans.add(employee_code=code, timestamp=ts)
            return self._engine.on_scan_inserted(uow, scan)

        result = self._transact(work)
        logger.info("Recorded scan %s for %s at %s (%s)", result.scan.scan_id, code, ts, result.window.value)
        return result

    def delete_scan(self, scan_id: int) -> Optional[AttendanceRecord]:
        def work(uow: UnitOfWork) -> Optional[AttendanceRecord]:
            scan = uow.scans.get_by_id(scan_id)
            if scan is None:
                raise NotFoundError(f"Biometric log {scan_id} not found")
            uow.scans.delete(scan_id)
            return self._engine.on_scan_deleted(uow, scan)

        record = self._transact(work)
        logger.info("Deleted scan %s", scan_id)
        return record

    def sync_all(self) -> SyncReport:
        return self._sync_job.sync_all()

    # ----- attendance records -----

    def get_record(self, employee_id: int, work_date: date) -> AttendanceRecord:
        def work(uow: UnitOfWork) -> AttendanceRecord:
            record = uow.attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
            if record is None:
                raise NotFoundError(f"No attendance for employee {employee_id} on {work_date}")
            return self._engine.repair_if_stale(uow, record)

        return self._transact(work)

    def update_times(self, employee_id: int, work_date: date, *, time_in=UNCHANGED, time_out=UNCHANGED) -> AttendanceRecord:
        if time_in is UNCHANGED and time_out is UNCHANGED:
            raise ValidationError("Provide time_in and/or time_out")

        record = self._transact(
            lambda uow: self._engine.update_times(uow, employee_id, work_date, time_in=time_in, time_out=time_out)
        )
        logger.info("Manual times for employee %s on %s: in=%s out=%s", employee_id, work_date, record.time_in, record.time_out)
        return record

    def set_override(
        self,
        employee_id: int,
        work_date: date,
        *,
        status,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status {status!r}")

        record = self._transact(
            lambda uow: self._engine.set_override(uow, employee_id, work_date, status=status, remarks=remarks)
        )
        logger.info("Override %s set for employee %s on %s", status.value, employee_id, work_date)
        return record

    def clear_override(self, employee_id: int, work_date: date) -> AttendanceRecord:
        record = self._transact(lambda uow: self._engine.clear_override(uow, employee_id, work_date))
        logger.info("Override cleared for employee %s on %s: now %s", employee_id, work_date, record.status.value)
        return record

    # ----- overtime -----

    def set_overtime(self, employee_id: int, work_date: date, is_overtime) -> AttendanceRecord:
        flag = require_bool(is_overtime, "is_overtime")
        record = self._transact(lambda uow: self._engine.set_overtime(uow, employee_id, work_date, is_overtime=flag))
        logger.info("Overtime %s for employee %s on %s", "on" if flag else "off", employee_id, work_date)
        return record

    def set_overtime_bulk(self, employee_ids, work_date: date, is_overtime) -> int:
        """Flag several employees' records for one date in a single transaction."""
        flag = require_bool(is_overtime, "is_overtime")
        if not isinstance(employee_ids, (list, tuple)) or not employee_ids:
            raise ValidationError("employee_ids must be a non-empty list")
        try:
            ids = [int(i) for i in employee_ids]
        except (TypeError, ValueError):
            raise ValidationError("employee_ids must contain integers")

        updated = self._transact(lambda uow: self._engine.set_overtime_bulk(uow, ids, work_date, is_overtime=flag))
        logger.info("Overtime %s for %s record(s) on %s", "on" if flag else "off", updated, work_date)
        return updated

    def periods(self, record: AttendanceRecord) -> WorkPeriods:
        return self._engine.periods(record)
