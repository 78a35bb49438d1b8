from __future__ import annotations

from typing import Optional

from ..database.mysql_base import fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        # BINARY keeps the match case-sensitive under a *_ci collation.
        self._cur.execute(
            "SELECT id, employee_code, full_name FROM employees WHERE employee_code = BINARY %s",
            (employee_code,),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Employee(employee_id=int(r["id"]), employee_code=r["employee_code"], full_name=r.get("full_name"))

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        self._cur.execute(
            "SELECT id, employee_code, full_name FROM employees WHERE id=%s",
            (int(employee_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Employee(employee_id=int(r["id"]), employee_code=r["employee_code"], full_name=r.get("full_name"))
