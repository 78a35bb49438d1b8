from __future__ import annotations

from datetime import time
from typing import Iterable, Optional

from ..core.enums import ScanWindow
from .classifier import WindowClassifier
from .model import ScanEvent


class ScanAggregator:
    """Pick the effective time-in / time-out from a day's scans.

    Candidates are expected to belong to one employee-day already; only the
    time-of-day is compared.
    """

    def __init__(self, classifier: Optional[WindowClassifier] = None):
        self._classifier = classifier or WindowClassifier()

    @property
    def classifier(self) -> WindowClassifier:
        return self._classifier

    def _times(self, scans: Iterable[ScanEvent], window: ScanWindow) -> list[time]:
        return [s.time_of_day for s in scans if self._classifier.classify(s.timestamp) == window]

    def earliest_time_in(self, scans: Iterable[ScanEvent]) -> Optional[time]:
        times = self._times(scans, ScanWindow.TIME_IN)
        return min(times) if times else None

    def latest_time_out(self, scans: Iterable[ScanEvent]) -> Optional[time]:
        times = self._times(scans, ScanWindow.TIME_OUT)
        return max(times) if times else None

    def select_time_in(self, existing: Optional[time], scans: Iterable[ScanEvent]) -> Optional[time]:
        candidate = self.earliest_time_in(scans)
        if candidate is None:
            return existing
        if existing is not None and existing <= candidate:
            return existing
        return candidate

    def select_time_out(self, existing: Optional[time], scans: Iterable[ScanEvent]) -> Optional[time]:
        candidate = self.latest_time_out(scans)
        if candidate is None:
            return existing
        if existing is not None and existing >= candidate:
            return existing
        return candidate
