from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(
        self,
        employee_id: int,
        work_date: date,
        *,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        """Load one day record; `for_update` locks the row until the transaction ends."""

        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a new record or update an existing one; returns the stored record."""

        raise NotImplementedError

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_orphaned(self) -> Sequence[AttendanceRecord]:
        """Records whose employee no longer exists."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
