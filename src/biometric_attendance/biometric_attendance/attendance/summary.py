from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional

from ..common.datetime_utils import clock_from_seconds, seconds_of_day
from ..core.constants import (
    MORNING_BLOCK_HOURS,
    REMARKS_COMPLETE,
    REMARKS_MISSING_BOTH,
    REMARKS_MISSING_TIME_IN,
    REMARKS_MISSING_TIME_OUT,
)
from ..core.enums import AttendanceStatus

if TYPE_CHECKING:
    from ..settings.model import AttendanceSettings

_TWO_PLACES = Decimal("0.01")


def _hours(minutes: int) -> Decimal:
    return (Decimal(minutes) / Decimal(60)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def _fmt(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


@dataclass(frozen=True)
class AttendanceSummary:
    status: AttendanceStatus
    remarks: str
    total_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None


@dataclass(frozen=True)
class WorkPeriods:
    """A complete day split around the lunch break, plus approved overtime."""

    morning_in: Optional[time] = None
    morning_out: Optional[time] = None
    afternoon_in: Optional[time] = None
    afternoon_out: Optional[time] = None
    overtime_in: Optional[time] = None
    overtime_out: Optional[time] = None

    def to_dict(self) -> dict:
        return {
            "morning_time_in": _fmt(self.morning_in),
            "morning_time_out": _fmt(self.morning_out),
            "afternoon_time_in": _fmt(self.afternoon_in),
            "afternoon_time_out": _fmt(self.afternoon_out),
            "overtime_time_in": _fmt(self.overtime_in),
            "overtime_time_out": _fmt(self.overtime_out),
        }


class AttendanceSummaryCalculator:
    """Derive status, remarks and total hours from a day's time pair.

    Rules (first match wins):
    - both times: Late if time_in is after the required start, else Present; "Complete"
    - only time_in: Incomplete, "Missing Time Out"
    - only time_out: Incomplete, "Missing Time In"
    - neither: Incomplete, "Missing Time In & Time Out"

    Hours start at the later of time_in and the required start, so arriving
    early earns nothing; an uncounted break is deducted once, never below zero.
    Overtime hours are only set on complete days flagged for overtime, and run
    from the required end to time_out.
    """

    def calculate(
        self,
        *,
        time_in: Optional[time],
        time_out: Optional[time],
        work_date: date,
        settings: "AttendanceSettings",
        is_overtime: bool = False,
    ) -> AttendanceSummary:
        # Hours never span midnight; work_date is unused.
        if time_in and time_out:
            status = AttendanceStatus.LATE if time_in > settings.required_time_in else AttendanceStatus.PRESENT
            return AttendanceSummary(
                status=status,
                remarks=REMARKS_COMPLETE,
                total_hours=self.total_hours(time_in=time_in, time_out=time_out, settings=settings),
                overtime_hours=self.overtime_hours(time_out=time_out, settings=settings) if is_overtime else None,
            )
        if time_in:
            return AttendanceSummary(status=AttendanceStatus.INCOMPLETE, remarks=REMARKS_MISSING_TIME_OUT)
        if time_out:
            return AttendanceSummary(status=AttendanceStatus.INCOMPLETE, remarks=REMARKS_MISSING_TIME_IN)
        return AttendanceSummary(status=AttendanceStatus.INCOMPLETE, remarks=REMARKS_MISSING_BOTH)

    def worked_minutes(self, *, time_in: time, time_out: time, settings: "AttendanceSettings") -> int:
        work_start = max(time_in, settings.required_time_in)
        minutes = max(0, (seconds_of_day(time_out) - seconds_of_day(work_start)) // 60)
        if not settings.break_is_counted:
            minutes = max(0, minutes - int(settings.break_duration_minutes))
        return minutes

    def total_hours(self, *, time_in: time, time_out: time, settings: "AttendanceSettings") -> Decimal:
        return _hours(self.worked_minutes(time_in=time_in, time_out=time_out, settings=settings))

    def overtime_hours(self, *, time_out: time, settings: "AttendanceSettings") -> Optional[Decimal]:
        if time_out <= settings.required_time_out:
            return None
        return _hours((seconds_of_day(time_out) - seconds_of_day(settings.required_time_out)) // 60)

    def periods(
        self,
        *,
        time_in: Optional[time],
        time_out: Optional[time],
        settings: "AttendanceSettings",
        is_overtime: bool = False,
    ) -> WorkPeriods:
        if not (time_in and time_out):
            return WorkPeriods()

        break_start_s = seconds_of_day(settings.required_time_in) + MORNING_BLOCK_HOURS * 3600
        break_start = clock_from_seconds(break_start_s)
        break_end = clock_from_seconds(break_start_s + int(settings.break_duration_minutes) * 60)
        required_out = settings.required_time_out

        morning_in = morning_out = None
        if time_in <= break_start:
            morning_in, morning_out = time_in, min(time_out, break_start)

        afternoon_in = afternoon_out = None
        if time_out >= break_end:
            start, end = max(time_in, break_end), min(time_out, required_out)
            if start < end:
                afternoon_in, afternoon_out = start, end

        overtime_in = overtime_out = None
        if is_overtime and time_out > required_out:
            overtime_in, overtime_out = required_out, time_out

        return WorkPeriods(
            morning_in=morning_in,
            morning_out=morning_out,
            afternoon_in=afternoon_in,
            afternoon_out=afternoon_out,
            overtime_in=overtime_in,
            overtime_out=overtime_out,
        )
