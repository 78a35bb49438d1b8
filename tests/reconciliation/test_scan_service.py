import logging
from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.biometric_attendance.biometric_attendance.attendance.model import AttendanceRecord
from src.biometric_attendance.biometric_attendance.core.enums import AttendanceStatus
from src.biometric_attendance.biometric_attendance.core.exceptions import (
    ConcurrencyConflict,
    InvariantViolation,
    NotFoundError,
)
from src.biometric_attendance.biometric_attendance.reconciliation.retry import run_with_retry

DAY = date(2025, 1, 2)


def test_conflicts_are_retried_with_backoff(scan_service, store, sleeps, record_for):
    store.pending_conflicts = 2

    result = scan_service.record_scan("EMP001", datetime(2025, 1, 2, 8, 0))

    assert sleeps == [0.05, 0.1]
    assert store.rollbacks == 2
    # rolled-back attempts leave no trace
    assert list(store.scans.values()) == [result.scan]
    assert record_for(1, DAY).time_in == time(8, 0)


def test_conflict_surfaces_after_retries_are_exhausted(scan_service, store, sleeps):
    store.pending_conflicts = 10

    with pytest.raises(ConcurrencyConflict):
        scan_service.record_scan("EMP001", datetime(2025, 1, 2, 8, 0))

    assert sleeps == [0.05, 0.1, 0.2]
    assert store.scans == {}
    assert store.attendance == {}


def test_run_with_retry_does_not_retry_other_errors():
    calls = []

    def op():
        calls.append(1)
        raise NotFoundError("gone")

    with pytest.raises(NotFoundError):
        run_with_retry(op, attempts=3, backoff_seconds=0, sleep=lambda s: None)
    assert len(calls) == 1


def test_run_with_retry_returns_value():
    assert run_with_retry(lambda: 42, sleep=lambda s: None) == 42


def test_get_record_returns_consistent_record(scan_service):
    scan_service.record_scan("EMP001", datetime(2025, 1, 2, 8, 0))

    rec = scan_service.get_record(1, DAY)

    assert rec.time_in == time(8, 0)
    assert rec.remarks == "Missing Time Out"


def test_get_record_missing(scan_service):
    with pytest.raises(NotFoundError):
        scan_service.get_record(1, DAY)


def test_stale_summary_is_repaired_on_read(scan_service, store, caplog):
    stale = AttendanceRecord(
        employee_id=1,
        work_date=DAY,
        time_in=time(8, 0),
        time_out=time(17, 0),
        status=AttendanceStatus.LATE,
        remarks="Missing Time Out",
        total_hours=Decimal("1.00"),
        attendance_id=50,
    )
    store.attendance[(1, DAY)] = stale

    with caplog.at_level(logging.WARNING):
        rec = scan_service.get_record(1, DAY)

    assert rec.status == AttendanceStatus.PRESENT
    assert rec.remarks == "Complete"
    assert rec.total_hours == Decimal("9.00")
    assert store.attendance[(1, DAY)] == rec
    assert "Recomputing stale attendance" in caplog.text


def test_check_consistency_raises_on_mismatch(engine):
    rec = AttendanceRecord(employee_id=1, work_date=DAY, time_in=time(8, 0), status=AttendanceStatus.PRESENT)

    with pytest.raises(InvariantViolation):
        engine.check_consistency(rec)

    engine.check_consistency(replace(rec, status=AttendanceStatus.INCOMPLETE, remarks="Missing Time Out"))


def test_override_records_are_never_reported_stale(engine):
    rec = AttendanceRecord(employee_id=1, work_date=DAY, time_in=time(8, 0), status=AttendanceStatus.ABSENT, remarks="Absent")

    engine.check_consistency(rec)


def test_sync_all_delegates_to_job(scan_service, store):
    report = scan_service.sync_all()

    assert report.to_dict() == {"created": 0, "updated": 0, "deleted": 0, "skipped": 0, "errors": []}
