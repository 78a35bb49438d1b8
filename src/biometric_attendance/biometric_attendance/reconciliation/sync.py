from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable

from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BACKOFF_SECONDS
from ..scans.model import ScanEvent
from .engine import ReconciliationEngine
from .model import DayOutcome, SyncError, SyncReport
from .retry import run_with_retry
from .unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


def group_scans(scans) -> dict[tuple[str, date], list[ScanEvent]]:
    """Group scans by (employee_code, date), keeping first-seen order."""
    groups: dict[tuple[str, date], list[ScanEvent]] = {}
    for scan in scans:
        groups.setdefault((scan.employee_code, scan.scan_date), []).append(scan)
    return groups


class BulkSyncJob:
    """Rebuild attendance from the full scan log.

    Each employee-day runs in its own transaction so one failing group does
    not block the rest. Running the job twice in a row reports no updates the
    second time.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        engine: ReconciliationEngine,
        *,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._uow_factory = uow_factory
        self._engine = engine
        self._retry_attempts = retry_attempts
        self._retry_backoff_seconds = retry_backoff_seconds
        self._sleep = sleep

    def _sync_group(self, employee_code: str, work_date: date, scans: list[ScanEvent]) -> DayOutcome:
        with self._uow_factory() as uow:
            employee = uow.employees.get_by_code(employee_code)
            if employee is None:
                return DayOutcome.SKIPPED
            outcome, _ = self._engine.reconcile_day(uow, employee.employee_id, work_date, scans)
            return outcome

    def _delete_orphans(self) -> int:
        with self._uow_factory() as uow:
            deleted = 0
            for record in uow.attendance.list_orphaned():
                if uow.attendance.delete(record.attendance_id):
                    deleted += 1
            return deleted

    def sync_all(self) -> SyncReport:
        report = SyncReport()

        with self._uow_factory() as uow:
            scans = list(uow.scans.list_all())

        groups = group_scans(scans)
        logger.info("Syncing attendance from %s scan(s) in %s employee-day group(s)", len(scans), len(groups))

        for (employee_code, work_date), day_scans in groups.items():
            try:
                outcome = run_with_retry(
                    lambda: self._sync_group(employee_code, work_date, day_scans),
                    attempts=self._retry_attempts,
                    backoff_seconds=self._retry_backoff_seconds,
                    sleep=self._sleep,
                )
            except Exception as exc:
                logger.exception("Sync failed for %s on %s", employee_code, work_date)
                report.errors.append(SyncError(employee_code=employee_code, work_date=work_date, message=str(exc)))
                continue

            if outcome == DayOutcome.SKIPPED:
                logger.debug("Skipped %s on %s", employee_code, work_date)
            report.count(outcome)

        report.deleted = run_with_retry(
            self._delete_orphans,
            attempts=self._retry_attempts,
            backoff_seconds=self._retry_backoff_seconds,
            sleep=self._sleep,
        )

        logger.info(
            "Attendance sync done: created=%s updated=%s deleted=%s skipped=%s errors=%s",
            report.created,
            report.updated,
            report.deleted,
            report.skipped,
            len(report.errors),
        )
        return report
