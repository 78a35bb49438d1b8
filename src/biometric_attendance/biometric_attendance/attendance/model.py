from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from .summary import AttendanceSummary


@dataclass(frozen=True)
class AttendanceRecord:
    """Canonical attendance for one employee-day.

    `attendance_id` is None until the record has been stored.
    """

    employee_id: int
    work_date: date
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    status: AttendanceStatus = AttendanceStatus.INCOMPLETE
    remarks: str = ""
    total_hours: Optional[Decimal] = None
    is_overtime: bool = False
    overtime_hours: Optional[Decimal] = None
    attendance_id: Optional[int] = None

    @property
    def is_new(self) -> bool:
        return self.attendance_id is None

    @property
    def is_override(self) -> bool:
        return self.status.is_override

    @property
    def summary(self) -> AttendanceSummary:
        return AttendanceSummary(
            status=self.status,
            remarks=self.remarks,
            total_hours=self.total_hours,
            overtime_hours=self.overtime_hours,
        )

    def with_times(self, *, time_in: Optional[time], time_out: Optional[time]) -> "AttendanceRecord":
        return replace(self, time_in=time_in, time_out=time_out)

    def with_summary(self, summary: AttendanceSummary) -> "AttendanceRecord":
        return replace(
            self,
            status=summary.status,
            remarks=summary.remarks,
            total_hours=summary.total_hours,
            overtime_hours=summary.overtime_hours,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "time_in": self.time_in.strftime("%H:%M:%S") if self.time_in else None,
            "time_out": self.time_out.strftime("%H:%M:%S") if self.time_out else None,
            "total_hours": str(self.total_hours) if self.total_hours is not None else None,
            "is_overtime": bool(self.is_overtime),
            "overtime_hours": str(self.overtime_hours) if self.overtime_hours is not None else None,
            "status": self.status.value,
            "remarks": self.remarks,
        }
