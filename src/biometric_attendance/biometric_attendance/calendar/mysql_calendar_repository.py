from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.mysql_base import fetchone
from .model import Holiday, LeaveDay
from .repository import CalendarRepository


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, cur):
        self._cur = cur

    def find_leave(self, *, employee_id: int, work_date: date) -> Optional[LeaveDay]:
        self._cur.execute(
            """
            SELECT id, employee_id, date
            FROM employee_leaves
            WHERE employee_id=%s AND date=%s AND status='Approved'
            LIMIT 1
            """,
            (int(employee_id), work_date),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return LeaveDay(leave_id=int(r["id"]), employee_id=int(r["employee_id"]), work_date=r["date"])

    def find_holiday(self, work_date: date) -> Optional[Holiday]:
        self._cur.execute(
            "SELECT id, date, name FROM holidays WHERE date=%s LIMIT 1",
            (work_date,),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Holiday(holiday_id=int(r["id"]), holiday_date=r["date"], name=r["name"])
