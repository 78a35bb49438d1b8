from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Day status stored on an attendance record."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    INCOMPLETE = "Incomplete"
    LEAVE = "Leave"
    HOLIDAY = "Holiday"

    @property
    def is_override(self) -> bool:
        """Statuses set by an outside authority (leave approval, holidays, HR)."""
        return self in OVERRIDE_STATUSES


OVERRIDE_STATUSES = frozenset({AttendanceStatus.ABSENT, AttendanceStatus.LEAVE, AttendanceStatus.HOLIDAY})


class ScanWindow(str, Enum):
    """Half-day window a scan's time-of-day falls into."""

    TIME_IN = "TimeIn"
    TIME_OUT = "TimeOut"
    UNCLASSIFIED = "Unclassified"
