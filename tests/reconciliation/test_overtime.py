from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.biometric_attendance.biometric_attendance.core.enums import AttendanceStatus
from src.biometric_attendance.biometric_attendance.core.exceptions import NotFoundError, ValidationError
from src.biometric_attendance.biometric_attendance.settings.model import AttendanceSettings

DAY = date(2025, 1, 2)


@pytest.fixture(autouse=True)
def office_hours(settings_repo):
    settings_repo.create(AttendanceSettings(required_time_in=time(8, 0), required_time_out=time(17, 0)))


def _full_day(scan_service, code="EMP001", out=time(18, 30)):
    scan_service.record_scan(code, datetime(2025, 1, 2, 8, 0))
    scan_service.record_scan(code, datetime.combine(DAY, out))


def test_flagging_overtime_computes_hours(scan_service, record_for):
    _full_day(scan_service)
    assert record_for(1, DAY).overtime_hours is None

    rec = scan_service.set_overtime(1, DAY, True)

    assert rec.is_overtime is True
    assert rec.overtime_hours == Decimal("1.50")
    assert record_for(1, DAY) == rec
    assert scan_service.get_record(1, DAY) == rec


def test_unflagging_overtime_clears_hours(scan_service, record_for):
    _full_day(scan_service)
    scan_service.set_overtime(1, DAY, "true")

    rec = scan_service.set_overtime(1, DAY, False)

    assert (rec.is_overtime, rec.overtime_hours) == (False, None)


def test_overtime_needs_an_existing_record(scan_service):
    with pytest.raises(NotFoundError):
        scan_service.set_overtime(1, DAY, True)


def test_later_scan_extends_overtime(scan_service, record_for):
    _full_day(scan_service)
    scan_service.set_overtime(1, DAY, True)

    scan_service.record_scan("EMP001", datetime(2025, 1, 2, 19, 0))

    assert record_for(1, DAY).overtime_hours == Decimal("2.00")


def test_override_drops_overtime_hours_until_cleared(scan_service, record_for):
    _full_day(scan_service)
    scan_service.set_overtime(1, DAY, True)

    absent = scan_service.set_override(1, DAY, status="Absent")
    assert absent.overtime_hours is None
    assert scan_service.set_overtime(1, DAY, True).overtime_hours is None

    restored = scan_service.clear_override(1, DAY)
    assert restored.status == AttendanceStatus.PRESENT
    assert restored.overtime_hours == Decimal("1.50")


def test_settings_change_recomputes_overtime(scan_service, settings_service, record_for):
    _full_day(scan_service)
    scan_service.set_overtime(1, DAY, True)

    settings_service.save(required_time_in="08:00", required_time_out="18:00")

    assert record_for(1, DAY).overtime_hours == Decimal("0.50")


def test_bulk_overtime_counts_existing_records(scan_service, store, record_for):
    _full_day(scan_service, "EMP001")
    _full_day(scan_service, "EMP002", out=time(17, 45))
    commits = store.commits

    updated = scan_service.set_overtime_bulk([1, 2, 2, 99], DAY, True)

    assert updated == 2
    assert store.commits == commits + 1
    assert record_for(1, DAY).overtime_hours == Decimal("1.50")
    assert record_for(2, DAY).overtime_hours == Decimal("0.75")


@pytest.mark.parametrize(
    "employee_ids, flag",
    [([], True), (None, True), (["x"], True), ([1], "maybe")],
)
def test_bulk_overtime_validation(scan_service, employee_ids, flag):
    with pytest.raises(ValidationError):
        scan_service.set_overtime_bulk(employee_ids, DAY, flag)


def test_periods_for_stored_record(scan_service):
    _full_day(scan_service)
    rec = scan_service.set_overtime(1, DAY, True)

    p = scan_service.periods(rec)

    assert (p.morning_in, p.morning_out) == (time(8, 0), time(12, 0))
    assert (p.afternoon_in, p.afternoon_out) == (time(12, 0), time(17, 0))
    assert (p.overtime_in, p.overtime_out) == (time(17, 0), time(18, 30))
