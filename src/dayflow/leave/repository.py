from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        remarks: Optional[str],
    ) -> LeaveRequest:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        """Newest first. ``user_id=None`` means every employee."""

        raise NotImplementedError

    def count(self, *, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        admin_comments: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status`` and stamp the reviewer in one write.

        Returns False when the request is missing or no longer pending.
        """

        raise NotImplementedError
