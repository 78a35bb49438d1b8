from __future__ import annotations

import logging

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..calendar.mysql_calendar_repository import MySQLCalendarRepository
from ..employees.mysql_employee_repository import MySQLEmployeeRepository
from ..scans.mysql_scan_repository import MySQLScanRepository
from .connection import DatabaseConnection
from .mysql_base import as_conflict, is_conflict

logger = logging.getLogger(__name__)


class MySQLUnitOfWork:
    """One connection, one transaction, repositories sharing its cursor.

    Commits on a clean exit and rolls back otherwise. Lock and duplicate-key
    errors leave the block as ConcurrencyConflict.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._conn = None
        self._cur = None

    def __enter__(self) -> "MySQLUnitOfWork":
        self._conn = self._conn_factory.connect()
        self._conn.start_transaction(isolation_level="READ COMMITTED")
        self._cur = self._conn.cursor(dictionary=True)

        self.scans = MySQLScanRepository(self._cur)
        self.employees = MySQLEmployeeRepository(self._cur)
        self.attendance = MySQLAttendanceRepository(self._cur)
        self.calendar = MySQLCalendarRepository(self._cur)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                try:
                    self._conn.commit()
                except Exception as commit_exc:
                    self._conn.rollback()
                    if is_conflict(commit_exc):
                        raise as_conflict(commit_exc) from commit_exc
                    raise
                return False

            self._conn.rollback()
            if is_conflict(exc):
                logger.warning("Transaction rolled back on conflict: %s", exc)
                raise as_conflict(exc) from exc
            return False
        finally:
            self._cur.close()
            self._conn.close()


def mysql_unit_of_work_factory(conn_factory: DatabaseConnection):
    def factory() -> MySQLUnitOfWork:
        return MySQLUnitOfWork(conn_factory)

    return factory
