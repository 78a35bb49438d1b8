from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Holiday, LeaveDay


class CalendarRepository(Protocol):
    def find_leave(self, *, employee_id: int, work_date: date) -> Optional[LeaveDay]:
        """Approved leave covering the employee-day, if any."""

        raise NotImplementedError

    def find_holiday(self, work_date: date) -> Optional[Holiday]:
        raise NotImplementedError
