from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..common.validators import require_bool, require_clock
from ..core.exceptions import ValidationError
from .model import AttendanceSettings
from .provider import SettingsProvider
from .repository import SettingsRepository

if TYPE_CHECKING:
    from ..reconciliation.engine import ReconciliationEngine
    from ..reconciliation.model import RecomputeReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsSaveResult:
    settings: AttendanceSettings
    recompute: Optional["RecomputeReport"] = None


class AttendanceSettingsService:
    def __init__(
        self,
        settings: SettingsRepository,
        provider: SettingsProvider,
        *,
        engine: Optional["ReconciliationEngine"] = None,
    ):
        self._settings = settings
        self._provider = provider
        self._engine = engine

    def get(self) -> AttendanceSettings:
        return self._provider.current()

    def save(
        self,
        *,
        required_time_in: str,
        required_time_out: str,
        break_duration_minutes=0,
        break_is_counted=False,
    ) -> SettingsSaveResult:
        """Store a new settings row (latest wins) and re-derive existing records.

        The row is committed first; records that could not be re-derived are
        listed in the result and repaired the next time they are read.
        """

        try:
            minutes = int(break_duration_minutes or 0)
        except (TypeError, ValueError):
            raise ValidationError("break_duration_minutes must be an integer")

        new_settings = AttendanceSettings(
            required_time_in=require_clock(required_time_in, "required_time_in"),
            required_time_out=require_clock(required_time_out, "required_time_out"),
            break_duration_minutes=minutes,
            break_is_counted=require_bool(break_is_counted, "break_is_counted"),
        )
        self._settings.create(new_settings)
        logger.info(
            "Attendance settings saved: %s-%s break=%sm counted=%s",
            new_settings.required_time_in,
            new_settings.required_time_out,
            new_settings.break_duration_minutes,
            new_settings.break_is_counted,
        )

        if self._engine is None:
            return SettingsSaveResult(settings=new_settings)

        report = self._engine.on_settings_changed()
        logger.info("Settings change re-derived %s attendance record(s)", report.changed)
        if report.errors:
            logger.error(
                "Settings change left %s attendance record(s) stale: %s",
                len(report.errors),
                ", ".join(f"{e.employee_id}@{e.work_date}" for e in report.errors),
            )
        return SettingsSaveResult(settings=new_settings, recompute=report)
