from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ScanEvent


class ScanRepository(Protocol):
    """Append-only store of raw scans; deletes are explicit admin actions."""

    def add(self, *, employee_code: str, timestamp: datetime) -> ScanEvent:
        raise NotImplementedError

    def get_by_id(self, scan_id: int) -> Optional[ScanEvent]:
        raise NotImplementedError

    def delete(self, scan_id: int) -> bool:
        raise NotImplementedError

    def list_for_day(self, *, employee_code: str, work_date: date) -> Sequence[ScanEvent]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ScanEvent]:
        """All scans ordered by timestamp ascending."""

        raise NotImplementedError
