from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.biometric_attendance.biometric_attendance.attendance.model import AttendanceRecord
from src.biometric_attendance.biometric_attendance.calendar.model import Holiday, LeaveDay
from src.biometric_attendance.biometric_attendance.core.exceptions import ConcurrencyConflict
from src.biometric_attendance.biometric_attendance.employees.model import Employee
from src.biometric_attendance.biometric_attendance.reconciliation.engine import ReconciliationEngine
from src.biometric_attendance.biometric_attendance.reconciliation.service import AttendanceScanService
from src.biometric_attendance.biometric_attendance.reconciliation.sync import BulkSyncJob
from src.biometric_attendance.biometric_attendance.scans.model import ScanEvent
from src.biometric_attendance.biometric_attendance.settings.model import AttendanceSettings
from src.biometric_attendance.biometric_attendance.settings.provider import RepositorySettingsProvider
from src.biometric_attendance.biometric_attendance.settings.service import AttendanceSettingsService


class InMemoryStore:
    """Shared tables behind the in-memory unit of work."""

    def __init__(self):
        self.employees: dict[int, Employee] = {}
        self.scans: dict[int, ScanEvent] = {}
        self.attendance: dict[tuple[int, date], AttendanceRecord] = {}
        self.leaves: list[LeaveDay] = []
        self.holidays: dict[date, Holiday] = {}
        self._scan_id = 0
        self._attendance_id = 0
        # Number of upcoming row locks that fail as if another writer held them
        self.pending_conflicts = 0
        self.commits = 0
        self.rollbacks = 0

    def add_employee(self, employee_id: int, employee_code: str, full_name: Optional[str] = None) -> Employee:
        employee = Employee(employee_id=employee_id, employee_code=employee_code, full_name=full_name)
        self.employees[employee_id] = employee
        return employee

    def next_scan_id(self) -> int:
        self._scan_id += 1
        return self._scan_id

    def next_attendance_id(self) -> int:
        self._attendance_id += 1
        return self._attendance_id

    def snapshot(self):
        return dict(self.employees), dict(self.scans), dict(self.attendance)

    def restore(self, snap) -> None:
        self.employees, self.scans, self.attendance = (dict(s) for s in snap)


class InMemoryScans:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add(self, *, employee_code: str, timestamp: datetime) -> ScanEvent:
        scan = ScanEvent(scan_id=self._store.next_scan_id(), employee_code=employee_code, timestamp=timestamp)
        self._store.scans[scan.scan_id] = scan
        return scan

    def get_by_id(self, scan_id: int) -> Optional[ScanEvent]:
        return self._store.scans.get(scan_id)

    def delete(self, scan_id: int) -> bool:
        return self._store.scans.pop(scan_id, None) is not None

    def list_for_day(self, *, employee_code: str, work_date: date):
        return [
            s
            for s in self.list_all()
            if s.employee_code == employee_code and s.scan_date == work_date
        ]

    def list_all(self):
        return sorted(self._store.scans.values(), key=lambda s: (s.timestamp, s.scan_id))


class InMemoryEmployees:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        for e in self._store.employees.values():
            if e.employee_code == employee_code:
                return e
        return None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._store.employees.get(employee_id)


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_for_employee_and_date(self, employee_id: int, work_date: date, *, for_update: bool = False):
        if for_update and self._store.pending_conflicts > 0:
            self._store.pending_conflicts -= 1
            raise ConcurrencyConflict("Deadlock found when trying to get lock")
        return self._store.attendance.get((employee_id, work_date))

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        if record.is_new:
            record = replace(record, attendance_id=self._store.next_attendance_id())
        self._store.attendance[(record.employee_id, record.work_date)] = record
        return record

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None):
        rows = sorted(self._store.attendance.values(), key=lambda r: (r.work_date, r.employee_id))
        return [r for r in rows if (start is None or r.work_date >= start) and (end is None or r.work_date <= end)]

    def list_orphaned(self):
        return [r for r in self._store.attendance.values() if r.employee_id not in self._store.employees]

    def delete(self, attendance_id: int) -> bool:
        for key, r in list(self._store.attendance.items()):
            if r.attendance_id == attendance_id:
                del self._store.attendance[key]
                return True
        return False


class InMemoryCalendar:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def find_leave(self, *, employee_id: int, work_date: date) -> Optional[LeaveDay]:
        for leave in self._store.leaves:
            if leave.employee_id == employee_id and leave.work_date == work_date:
                return leave
        return None

    def find_holiday(self, work_date: date) -> Optional[Holiday]:
        return self._store.holidays.get(work_date)


class InMemoryUnitOfWork:
    """Snapshot on enter, restore on error: enough to mimic a rolled-back transaction."""

    def __init__(self, store: InMemoryStore):
        self._store = store
        self.scans = InMemoryScans(store)
        self.employees = InMemoryEmployees(store)
        self.attendance = InMemoryAttendance(store)
        self.calendar = InMemoryCalendar(store)

    def __enter__(self):
        self._snapshot = self._store.snapshot()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self._store.commits += 1
        else:
            self._store.restore(self._snapshot)
            self._store.rollbacks += 1
        return False


class InMemorySettingsRepo:
    def __init__(self):
        self.rows: list[AttendanceSettings] = []

    def get_latest(self) -> Optional[AttendanceSettings]:
        return self.rows[-1] if self.rows else None

    def create(self, settings: AttendanceSettings) -> int:
        self.rows.append(settings)
        return len(self.rows)


@pytest.fixture
def store():
    s = InMemoryStore()
    s.add_employee(1, "EMP001", "Alice Santos")
    s.add_employee(2, "EMP002", "Ben Reyes")
    return s


@pytest.fixture
def uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def settings_repo():
    return InMemorySettingsRepo()


@pytest.fixture
def settings_provider(settings_repo):
    return RepositorySettingsProvider(settings_repo)


@pytest.fixture
def engine(uow_factory, settings_provider, sleeps):
    return ReconciliationEngine(
        uow_factory,
        settings_provider,
        retry_attempts=3,
        retry_backoff_seconds=0.05,
        sleep=sleeps.append,
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sync_job(uow_factory, engine, sleeps):
    return BulkSyncJob(uow_factory, engine, retry_attempts=3, retry_backoff_seconds=0.05, sleep=sleeps.append)


@pytest.fixture
def scan_service(uow_factory, engine, sync_job, sleeps):
    return AttendanceScanService(
        uow_factory,
        engine,
        sync_job,
        retry_attempts=3,
        retry_backoff_seconds=0.05,
        sleep=sleeps.append,
    )


@pytest.fixture
def settings_service(settings_repo, settings_provider, engine):
    return AttendanceSettingsService(settings_repo, settings_provider, engine=engine)


@pytest.fixture
def record_for(store):
    def lookup(employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return store.attendance.get((employee_id, work_date))

    return lookup
