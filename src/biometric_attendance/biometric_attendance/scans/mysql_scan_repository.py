from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import ScanEvent
from .repository import ScanRepository


def _to_scan(r: dict) -> ScanEvent:
    return ScanEvent(scan_id=int(r["id"]), employee_code=r["employee_code"], timestamp=r["scan_time"])


class MySQLScanRepository(ScanRepository):
    """Scan queries bound to the cursor of an open unit of work."""

    def __init__(self, cur):
        self._cur = cur

    def add(self, *, employee_code: str, timestamp: datetime) -> ScanEvent:
        self._cur.execute(
            "INSERT INTO biometric_logs(employee_code, scan_time) VALUES(%s,%s)",
            (employee_code, timestamp),
        )
        return ScanEvent(scan_id=int(self._cur.lastrowid), employee_code=employee_code, timestamp=timestamp)

    def get_by_id(self, scan_id: int) -> Optional[ScanEvent]:
        self._cur.execute(
            "SELECT id, employee_code, scan_time FROM biometric_logs WHERE id=%s",
            (int(scan_id),),
        )
        r = fetchone(self._cur)
        return _to_scan(r) if r else None

    def delete(self, scan_id: int) -> bool:
        self._cur.execute("DELETE FROM biometric_logs WHERE id=%s", (int(scan_id),))
        return self._cur.rowcount > 0

    def list_for_day(self, *, employee_code: str, work_date: date) -> Sequence[ScanEvent]:
        # Half-open range keeps the index on scan_time usable.
        start = datetime.combine(work_date, datetime.min.time())
        self._cur.execute(
            """
            SELECT id, employee_code, scan_time
            FROM biometric_logs
            WHERE employee_code = BINARY %s AND scan_time >= %s AND scan_time < %s
            ORDER BY scan_time ASC, id ASC
            """,
            (employee_code, start, start + timedelta(days=1)),
        )
        return [_to_scan(r) for r in fetchall(self._cur)]

    def list_all(self) -> Sequence[ScanEvent]:
        self._cur.execute(
            """
            SELECT id, employee_code, scan_time
            FROM biometric_logs
            ORDER BY scan_time ASC, id ASC
            """
        )
        return [_to_scan(r) for r in fetchall(self._cur)]
