from __future__ import annotations

from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time."""
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def time_of_day(value: datetime) -> time:
    """Time-of-day at second precision (what attendance records store)."""
    return value.time().replace(microsecond=0)


def seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def clock_from_seconds(seconds: int) -> time:
    """Inverse of seconds_of_day, clamped to the same day."""
    seconds = max(0, min(int(seconds), 24 * 3600 - 1))
    return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
