from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from ..common.datetime_utils import time_of_day


@dataclass(frozen=True)
class ScanEvent:
    """A single biometric reading: immutable once stored."""

    scan_id: int
    employee_code: str
    timestamp: datetime

    @property
    def scan_date(self) -> date:
        return self.timestamp.date()

    @property
    def time_of_day(self) -> time:
        return time_of_day(self.timestamp)
