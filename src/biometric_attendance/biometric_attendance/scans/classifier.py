from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..common.datetime_utils import time_of_day
from ..core.constants import (
    TIME_IN_WINDOW_END,
    TIME_IN_WINDOW_START,
    TIME_OUT_WINDOW_END,
    TIME_OUT_WINDOW_START,
)
from ..core.enums import ScanWindow


@dataclass(frozen=True)
class WindowClassifier:
    """Map a scan timestamp to the half-day window it belongs to.

    Both windows are closed intervals on the time-of-day at second precision;
    the date is ignored.
    """

    time_in_start: time = TIME_IN_WINDOW_START
    time_in_end: time = TIME_IN_WINDOW_END
    time_out_start: time = TIME_OUT_WINDOW_START
    time_out_end: time = TIME_OUT_WINDOW_END

    def classify(self, timestamp: datetime) -> ScanWindow:
        t = time_of_day(timestamp)
        if self.time_in_start <= t <= self.time_in_end:
            return ScanWindow.TIME_IN
        if self.time_out_start <= t <= self.time_out_end:
            return ScanWindow.TIME_OUT
        return ScanWindow.UNCLASSIFIED
