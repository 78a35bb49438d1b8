from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .model import AttendanceSettings
from .repository import SettingsRepository


class SettingsProvider(Protocol):
    def current(self) -> AttendanceSettings:
        """Effective settings; never None."""

        raise NotImplementedError


@dataclass(frozen=True)
class StaticSettingsProvider:
    settings: AttendanceSettings = field(default_factory=AttendanceSettings.default)

    def current(self) -> AttendanceSettings:
        return self.settings


class RepositorySettingsProvider:
    """Latest stored settings row, or the built-in default (08:00-22:00, no break)."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def current(self) -> AttendanceSettings:
        return self._settings.get_latest() or AttendanceSettings.default()
