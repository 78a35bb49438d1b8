from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LeaveDay:
    """An approved leave covering one employee-day (read-only input)."""

    leave_id: int
    employee_id: int
    work_date: date


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    holiday_date: date
    name: str
