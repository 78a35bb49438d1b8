from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import (
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_BREAK_IS_COUNTED,
    DEFAULT_REQUIRED_TIME_IN,
    DEFAULT_REQUIRED_TIME_OUT,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceSettings:
    """Working-day configuration used to derive status and hours."""

    required_time_in: time
    required_time_out: time
    break_duration_minutes: int = 0
    break_is_counted: bool = False

    def __post_init__(self) -> None:
        if self.required_time_out <= self.required_time_in:
            raise ValidationError("required_time_out must be after required_time_in")
        if int(self.break_duration_minutes) < 0:
            raise ValidationError("break_duration_minutes cannot be negative")

    @classmethod
    def default(cls) -> "AttendanceSettings":
        return cls(
            required_time_in=DEFAULT_REQUIRED_TIME_IN,
            required_time_out=DEFAULT_REQUIRED_TIME_OUT,
            break_duration_minutes=DEFAULT_BREAK_DURATION_MINUTES,
            break_is_counted=DEFAULT_BREAK_IS_COUNTED,
        )
