from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    employee_id: int
    employee_code: str
    full_name: Optional[str] = None
