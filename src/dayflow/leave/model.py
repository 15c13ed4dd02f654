from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    created_at: datetime
    remarks: Optional[str] = None
    admin_comments: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Filled by list queries that join the requester's profile.
    requester_name: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
