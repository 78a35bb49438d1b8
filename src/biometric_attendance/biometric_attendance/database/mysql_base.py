from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConcurrencyConflict
from .connection import DatabaseConnection

# Errors that mean "another transaction got to this row first"; safe to retry.
CONFLICT_ERRNOS = frozenset({
    errorcode.ER_LOCK_DEADLOCK,
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    errorcode.ER_DUP_ENTRY,
})


def is_conflict(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) in CONFLICT_ERRNOS


def as_conflict(exc: BaseException) -> ConcurrencyConflict:
    return ConcurrencyConflict(f"Attendance row busy ({getattr(exc, 'errno', '?')}): {exc}")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta or "HH:MM[:SS]" depending on the connector."""
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds // 60) % 60, seconds % 60)

    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p]
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
