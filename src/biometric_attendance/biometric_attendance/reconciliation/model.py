from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import ScanWindow
from ..scans.model import ScanEvent


class DayOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of recording one scan.

    `warning` is set when the scan was stored but could not affect attendance
    (unknown employee code).
    """

    scan: ScanEvent
    window: ScanWindow
    attendance: Optional[AttendanceRecord] = None
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "biometric_log": {
                "id": self.scan.scan_id,
                "employee_code": self.scan.employee_code,
                "date": self.scan.scan_date.strftime("%Y-%m-%d"),
                "time": self.scan.time_of_day.strftime("%H:%M:%S"),
                "window": self.window.value,
            },
            "attendance": self.attendance.to_dict() if self.attendance else None,
            "warning": self.warning,
        }


@dataclass(frozen=True)
class SyncError:
    employee_code: str
    work_date: date
    message: str


@dataclass
class SyncReport:
    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    errors: list[SyncError] = field(default_factory=list)

    def count(self, outcome: DayOutcome) -> None:
        if outcome == DayOutcome.CREATED:
            self.created += 1
        elif outcome == DayOutcome.UPDATED:
            self.updated += 1
        elif outcome == DayOutcome.SKIPPED:
            self.skipped += 1

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "skipped": self.skipped,
            "errors": [
                {"employee_code": e.employee_code, "date": e.work_date.strftime("%Y-%m-%d"), "message": e.message}
                for e in self.errors
            ],
        }


@dataclass(frozen=True)
class RecomputeError:
    employee_id: int
    work_date: date
    message: str


@dataclass
class RecomputeReport:
    """Result of re-deriving stored records after a settings change."""

    changed: int = 0
    errors: list[RecomputeError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "changed": self.changed,
            "errors": [
                {"employee_id": e.employee_id, "date": e.work_date.strftime("%Y-%m-%d"), "message": e.message}
                for e in self.errors
            ],
        }
