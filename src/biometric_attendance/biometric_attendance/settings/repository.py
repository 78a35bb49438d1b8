from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSettings


class SettingsRepository(Protocol):
    def get_latest(self) -> Optional[AttendanceSettings]:
        """Most recently created settings row, if any."""

        raise NotImplementedError

    def create(self, settings: AttendanceSettings) -> int:
        raise NotImplementedError
