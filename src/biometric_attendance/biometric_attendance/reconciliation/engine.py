from __future__ import annotations

import logging
import time as _time
from dataclasses import replace
from datetime import date, time
from typing import Callable, Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.summary import AttendanceSummaryCalculator, WorkPeriods
from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BACKOFF_SECONDS, REMARKS_ON_LEAVE
from ..core.enums import AttendanceStatus, ScanWindow
from ..core.exceptions import InvariantViolation, NotFoundError, ValidationError
from ..scans.aggregator import ScanAggregator
from ..scans.model import ScanEvent
from ..settings.model import AttendanceSettings
from ..settings.provider import SettingsProvider
from .model import DayOutcome, RecomputeError, RecomputeReport, ScanResult
from .retry import run_with_retry
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

UNCHANGED = object()


class ReconciliationEngine:
    """Keep one employee-day record consistent with its scans.

    Methods taking a `uow` run inside the caller's transaction; the record is
    always read with a row lock before it is modified. Records carrying an
    override status (Absent, Leave, Holiday) are never recomputed here; only
    `clear_override` lifts one.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: SettingsProvider,
        *,
        aggregator: Optional[ScanAggregator] = None,
        calculator: Optional[AttendanceSummaryCalculator] = None,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = _time.sleep,
    ):
        self._uow_factory = uow_factory
        self._settings = settings
        self._aggregator = aggregator or ScanAggregator()
        self._calculator = calculator or AttendanceSummaryCalculator()
        self._retry_attempts = int(retry_attempts)
        self._retry_backoff_seconds = float(retry_backoff_seconds)
        self._sleep = sleep

    @property
    def classifier(self):
        return self._aggregator.classifier

    # ----- shared helpers -----

    def _load_or_create(self, uow: UnitOfWork, employee_id: int, work_date: date) -> AttendanceRecord:
        record = uow.attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
        if record is not None:
            return record

        if uow.calendar.find_leave(employee_id=employee_id, work_date=work_date):
            return AttendanceRecord(
                employee_id=employee_id,
                work_date=work_date,
                status=AttendanceStatus.LEAVE,
                remarks=REMARKS_ON_LEAVE,
            )

        holiday = uow.calendar.find_holiday(work_date)
        if holiday:
            return AttendanceRecord(
                employee_id=employee_id,
                work_date=work_date,
                status=AttendanceStatus.HOLIDAY,
                remarks=holiday.name,
            )

        return AttendanceRecord(employee_id=employee_id, work_date=work_date)

    def derive(self, record: AttendanceRecord, settings: Optional[AttendanceSettings] = None) -> AttendanceRecord:
        """Record with its summary recomputed; overrides come back untouched."""
        if record.is_override:
            return record
        summary = self._calculator.calculate(
            time_in=record.time_in,
            time_out=record.time_out,
            work_date=record.work_date,
            settings=settings or self._settings.current(),
            is_overtime=record.is_overtime,
        )
        return record.with_summary(summary)

    def periods(self, record: AttendanceRecord, settings: Optional[AttendanceSettings] = None) -> WorkPeriods:
        if record.is_override:
            return WorkPeriods()
        return self._calculator.periods(
            time_in=record.time_in,
            time_out=record.time_out,
            settings=settings or self._settings.current(),
            is_overtime=record.is_overtime,
        )

    @staticmethod
    def _save_if_changed(uow: UnitOfWork, before: AttendanceRecord, after: AttendanceRecord) -> AttendanceRecord:
        if after.is_new or after != before:
            return uow.attendance.save(after)
        return before

    def _window_scans(self, scans: Iterable[ScanEvent], window: ScanWindow) -> list[ScanEvent]:
        return [s for s in scans if self.classifier.classify(s.timestamp) == window]

    # ----- insert path -----

    def on_scan_inserted(self, uow: UnitOfWork, scan: ScanEvent) -> ScanResult:
        window = self.classifier.classify(scan.timestamp)

        employee = uow.employees.get_by_code(scan.employee_code)
        if employee is None:
            logger.warning("Scan %s kept without attendance: unknown employee code %r", scan.scan_id, scan.employee_code)
            return ScanResult(
                scan=scan,
                window=window,
                warning=f"No employee matches code {scan.employee_code!r}; scan stored without attendance.",
            )

        if window == ScanWindow.UNCLASSIFIED:
            current = uow.attendance.get_for_employee_and_date(employee.employee_id, scan.scan_date)
            return ScanResult(scan=scan, window=window, attendance=current)

        record = self._load_or_create(uow, employee.employee_id, scan.scan_date)
        if record.is_override:
            stored = uow.attendance.save(record) if record.is_new else record
            return ScanResult(scan=scan, window=window, attendance=stored)

        candidates = self._window_scans(
            uow.scans.list_for_day(employee_code=scan.employee_code, work_date=scan.scan_date),
            window,
        )
        if all(s.scan_id != scan.scan_id for s in candidates):
            candidates.append(scan)

        if window == ScanWindow.TIME_IN:
            updated = record.with_times(
                time_in=self._aggregator.select_time_in(record.time_in, candidates),
                time_out=record.time_out,
            )
        else:
            updated = record.with_times(
                time_in=record.time_in,
                time_out=self._aggregator.select_time_out(record.time_out, candidates),
            )

        stored = self._save_if_changed(uow, record, self.derive(updated))
        return ScanResult(scan=scan, window=window, attendance=stored)

    # ----- delete path -----

    def on_scan_deleted(self, uow: UnitOfWork, scan: ScanEvent) -> Optional[AttendanceRecord]:
        """Replace or clear the field the deleted scan was providing.

        Unlike the insert path, a matching field is always overwritten: the
        stored value came from a scan that no longer exists.
        """
        window = self.classifier.classify(scan.timestamp)
        if window == ScanWindow.UNCLASSIFIED:
            return None

        employee = uow.employees.get_by_code(scan.employee_code)
        if employee is None:
            return None

        record = uow.attendance.get_for_employee_and_date(employee.employee_id, scan.scan_date, for_update=True)
        if record is None or record.is_override:
            return record

        current = record.time_in if window == ScanWindow.TIME_IN else record.time_out
        if current != scan.time_of_day:
            return record

        remaining = [
            s
            for s in uow.scans.list_for_day(employee_code=scan.employee_code, work_date=scan.scan_date)
            if s.scan_id != scan.scan_id
        ]
        if window == ScanWindow.TIME_IN:
            updated = record.with_times(time_in=self._aggregator.earliest_time_in(remaining), time_out=record.time_out)
        else:
            updated = record.with_times(time_in=record.time_in, time_out=self._aggregator.latest_time_out(remaining))

        return self._save_if_changed(uow, record, self.derive(updated))

    # ----- whole-day reconciliation (bulk sync, clearing overrides) -----

    def reconcile_day(
        self,
        uow: UnitOfWork,
        employee_id: int,
        work_date: date,
        scans: Iterable[ScanEvent],
    ) -> tuple[DayOutcome, Optional[AttendanceRecord]]:
        """Fold every scan of the day into the record with the preserve-if-optimal rule."""
        scans = list(scans)
        has_candidates = any(self.classifier.classify(s.timestamp) != ScanWindow.UNCLASSIFIED for s in scans)

        record = self._load_or_create(uow, employee_id, work_date)
        if record.is_new and not has_candidates:
            return DayOutcome.SKIPPED, None

        if record.is_override:
            if record.is_new:
                return DayOutcome.CREATED, uow.attendance.save(record)
            return DayOutcome.UNCHANGED, record

        updated = self.derive(
            record.with_times(
                time_in=self._aggregator.select_time_in(record.time_in, scans),
                time_out=self._aggregator.select_time_out(record.time_out, scans),
            )
        )
        if record.is_new:
            return DayOutcome.CREATED, uow.attendance.save(updated)
        if updated != record:
            return DayOutcome.UPDATED, uow.attendance.save(updated)
        return DayOutcome.UNCHANGED, record

    # ----- settings change -----

    def _rederive_one(self, employee_id: int, work_date: date, settings: AttendanceSettings) -> bool:
        with self._uow_factory() as uow:
            record = uow.attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
            if record is None:
                return False
            updated = self.derive(record, settings)
            if updated == record:
                return False
            uow.attendance.save(updated)
            return True

    def on_settings_changed(self, *, start: Optional[date] = None, end: Optional[date] = None) -> RecomputeReport:
        """Recompute summaries under the current settings.

        Each record is its own transaction, retried on lock conflicts. A record
        that still fails is logged and reported; the rest keep going.
        """
        settings = self._settings.current()
        with self._uow_factory() as uow:
            keys = [
                (r.employee_id, r.work_date)
                for r in uow.attendance.list_range(start=start, end=end)
                if not r.is_override
            ]

        report = RecomputeReport()
        for employee_id, work_date in keys:
            try:
                changed = run_with_retry(
                    lambda: self._rederive_one(employee_id, work_date, settings),
                    attempts=self._retry_attempts,
                    backoff_seconds=self._retry_backoff_seconds,
                    sleep=self._sleep,
                )
            except Exception as exc:
                logger.exception("Re-deriving attendance failed for employee %s on %s", employee_id, work_date)
                report.errors.append(RecomputeError(employee_id=employee_id, work_date=work_date, message=str(exc)))
                continue
            if changed:
                report.changed += 1
        return report

    # ----- manual edits and overrides -----

    def update_times(
        self,
        uow: UnitOfWork,
        employee_id: int,
        work_date: date,
        *,
        time_in=UNCHANGED,
        time_out=UNCHANGED,
    ) -> AttendanceRecord:
        """Manual entry: set either or both times (None clears) and recompute."""
        if uow.employees.get_by_id(employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        record = self._load_or_create(uow, employee_id, work_date)
        new_in: Optional[time] = record.time_in if time_in is UNCHANGED else time_in
        new_out: Optional[time] = record.time_out if time_out is UNCHANGED else time_out
        if new_in and new_out and new_out < new_in:
            raise ValidationError("time_out cannot be earlier than time_in")

        updated = self.derive(record.with_times(time_in=new_in, time_out=new_out))
        return self._save_if_changed(uow, record, updated)

    def set_override(
        self,
        uow: UnitOfWork,
        employee_id: int,
        work_date: date,
        *,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        if not status.is_override:
            raise ValidationError(f"{status.value} is not an override status")
        if uow.employees.get_by_id(employee_id) is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        record = self._load_or_create(uow, employee_id, work_date)
        updated = replace(
            record,
            status=status,
            remarks=(remarks or status.value),
            total_hours=None,
            overtime_hours=None,
        )
        return self._save_if_changed(uow, record, updated)

    def clear_override(self, uow: UnitOfWork, employee_id: int, work_date: date) -> AttendanceRecord:
        record = uow.attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
        if record is None:
            raise NotFoundError(f"No attendance for employee {employee_id} on {work_date}")
        if not record.is_override:
            return record

        # Drop the override first so derive() treats it as a regular day.
        cleared = replace(record, status=AttendanceStatus.INCOMPLETE)
        employee = uow.employees.get_by_id(employee_id)
        if employee is not None:
            scans = uow.scans.list_for_day(employee_code=employee.employee_code, work_date=work_date)
            cleared = cleared.with_times(
                time_in=self._aggregator.select_time_in(cleared.time_in, scans),
                time_out=self._aggregator.select_time_out(cleared.time_out, scans),
            )
        return uow.attendance.save(self.derive(cleared))

    # ----- overtime -----

    def set_overtime(self, uow: UnitOfWork, employee_id: int, work_date: date, *, is_overtime: bool) -> AttendanceRecord:
        """Flag or unflag an existing day for overtime and recompute its hours."""
        record = uow.attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
        if record is None:
            raise NotFoundError(f"No attendance for employee {employee_id} on {work_date}")
        updated = self.derive(replace(record, is_overtime=bool(is_overtime)))
        return self._save_if_changed(uow, record, updated)

    def set_overtime_bulk(self, uow: UnitOfWork, employee_ids: Iterable[int], work_date: date, *, is_overtime: bool) -> int:
        """Apply the overtime flag to every listed employee that has a record on `work_date`."""
        updated = 0
        for employee_id in sorted(set(employee_ids)):
            record = uow.attendance.get_for_employee_and_date(employee_id, work_date, for_update=True)
            if record is None:
                continue
            self._save_if_changed(uow, record, self.derive(replace(record, is_overtime=bool(is_overtime))))
            updated += 1
        return updated

    # ----- read-side invariant check -----

    def check_consistency(self, record: AttendanceRecord, settings: Optional[AttendanceSettings] = None) -> None:
        expected = self.derive(record, settings)
        if expected.summary != record.summary:
            raise InvariantViolation(
                f"Attendance {record.attendance_id} summary {record.summary} does not match times; expected {expected.summary}"
            )

    def repair_if_stale(self, uow: UnitOfWork, record: AttendanceRecord) -> AttendanceRecord:
        try:
            self.check_consistency(record)
        except InvariantViolation as exc:
            logger.warning("Recomputing stale attendance: %s", exc)
            return uow.attendance.save(self.derive(record))
        return record
