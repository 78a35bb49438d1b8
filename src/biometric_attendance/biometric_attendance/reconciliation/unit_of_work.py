from __future__ import annotations

from typing import Callable, Protocol

from ..attendance.repository import AttendanceRepository
from ..calendar.repository import CalendarRepository
from ..employees.repository import EmployeeRepository
from ..scans.repository import ScanRepository


class UnitOfWork(Protocol):
    """Repositories sharing one transaction.

    Leaving the `with` block normally commits; an exception rolls back.
    Store-level serialization failures surface as ConcurrencyConflict.
    """

    scans: ScanRepository
    employees: EmployeeRepository
    attendance: AttendanceRepository
    calendar: CalendarRepository

    def __enter__(self) -> "UnitOfWork":
        raise NotImplementedError

    def __exit__(self, exc_type, exc, tb) -> bool:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], UnitOfWork]
