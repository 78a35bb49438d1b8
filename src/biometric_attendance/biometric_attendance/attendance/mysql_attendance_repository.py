from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.mysql_base import fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "a.id, a.employee_id, a.date, a.time_in, a.time_out, a.status, a.remarks, a.total_hours, "
    "a.is_overtime, a.overtime_hours"
)


def _decimal(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks") or "",
        total_hours=_decimal(r.get("total_hours")),
        is_overtime=bool(r.get("is_overtime")),
        overtime_hours=_decimal(r.get("overtime_hours")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_for_employee_and_date(
        self,
        employee_id: int,
        work_date: date,
        *,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance a WHERE a.employee_id=%s AND a.date=%s"
        if for_update:
            sql += " FOR UPDATE"
        self._cur.execute(sql, (int(employee_id), work_date))
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        params = (
            record.time_in,
            record.time_out,
            record.status.value,
            record.remarks,
            record.total_hours,
            1 if record.is_overtime else 0,
            record.overtime_hours,
        )
        if record.is_new:
            # A concurrent insert of the same employee-day fails on uq_attendance_employee_date.
            self._cur.execute(
                """
                INSERT INTO attendance(
                    employee_id, date, time_in, time_out, status, remarks, total_hours, is_overtime, overtime_hours
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(record.employee_id), record.work_date) + params,
            )
            return replace(record, attendance_id=int(self._cur.lastrowid))

        self._cur.execute(
            """
            UPDATE attendance
            SET time_in=%s, time_out=%s, status=%s, remarks=%s, total_hours=%s, is_overtime=%s, overtime_hours=%s
            WHERE id=%s
            """,
            params + (int(record.attendance_id),),
        )
        return record

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("a.date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("a.date <= %s")
            params.append(end)

        where = " AND ".join(clauses)
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM attendance a WHERE {where} ORDER BY a.date ASC, a.employee_id ASC",
            tuple(params),
        )
        return [_to_record(r) for r in fetchall(self._cur)]

    def list_orphaned(self) -> Sequence[AttendanceRecord]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance a
            LEFT JOIN employees e ON e.id = a.employee_id
            WHERE e.id IS NULL
            ORDER BY a.id ASC
            """
        )
        return [_to_record(r) for r in fetchall(self._cur)]

    def delete(self, attendance_id: int) -> bool:
        self._cur.execute("DELETE FROM attendance WHERE id=%s", (int(attendance_id),))
        return self._cur.rowcount > 0
