from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Insert the day's row. Raises ConflictError if (user_id, work_date) exists."""

        raise NotImplementedError

    def update_checkout(self, *, record_id: int, check_out: datetime) -> bool:
        """Sets check_out only while it is still empty; False when nothing was updated."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceRecord]:
        """Newest date first; bounds are inclusive; None means unbounded."""

        raise NotImplementedError

    def count_for_date(self, work_date: date, statuses: Sequence[AttendanceStatus]) -> int:
        raise NotImplementedError
