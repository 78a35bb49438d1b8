from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Employee directory lookups (read-only for this package)."""

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        """Exact, case-sensitive match on the stored code."""

        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError
