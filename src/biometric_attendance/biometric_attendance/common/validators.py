from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import EMPLOYEE_CODE_MAX_LENGTH
from ..core.exceptions import ValidationError
from .datetime_utils import parse_clock, parse_iso_date

_EMPLOYEE_CODE_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_employee_code(value: str) -> str:
    code = require_non_empty(value, "employee_code")
    if len(code) > EMPLOYEE_CODE_MAX_LENGTH or not _EMPLOYEE_CODE_RE.match(code):
        raise ValidationError(f"employee_code {code!r} is malformed")
    return code


def require_bool(value, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    v = str(value or "").strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"", "0", "false", "no", "off"}:
        return False
    raise ValidationError(f"{field_name} must be a boolean")


def require_date(value: str, field_name: str) -> date:
    try:
        return parse_iso_date(require_non_empty(value, field_name))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def require_clock(value: str, field_name: str) -> time:
    try:
        return parse_clock(require_non_empty(value, field_name))
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM or HH:MM:SS")


def optional_clock(value: Optional[str], field_name: str) -> Optional[time]:
    if value is None or not str(value).strip():
        return None
    return require_clock(str(value), field_name)


def require_scan_timestamp(value) -> datetime:
    """Accept a naive local datetime or ISO-8601 string; drop sub-second precision.

    Scanners report wall-clock time, so values carrying a UTC offset are rejected.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(f"timestamp {value!r} is malformed")
    else:
        raise ValidationError(f"timestamp {value!r} is malformed")

    if parsed.tzinfo is not None:
        raise ValidationError(f"timestamp {value!r} must be local time without a UTC offset")
    return parsed.replace(microsecond=0)
