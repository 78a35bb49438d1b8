from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import AttendanceSettings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest(self) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT required_time_in, required_time_out, break_duration_minutes, break_is_counted
                FROM attendance_settings
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceSettings(
                required_time_in=normalize_mysql_time(r["required_time_in"]),
                required_time_out=normalize_mysql_time(r["required_time_out"]),
                break_duration_minutes=int(r.get("break_duration_minutes") or 0),
                break_is_counted=bool(r.get("break_is_counted")),
            )

    def create(self, settings: AttendanceSettings) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_settings(required_time_in, required_time_out, break_duration_minutes, break_is_counted)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    settings.required_time_in,
                    settings.required_time_out,
                    int(settings.break_duration_minutes),
                    1 if settings.break_is_counted else 0,
                ),
            )
            return int(cur.lastrowid)
