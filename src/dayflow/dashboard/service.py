from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.enums import AttendanceStatus, LeaveStatus
from ..identity.authorization import AuthorizationContext
from ..identity.repository import ProfileRepository
from ..leave.model import LeaveRequest
from ..leave.repository import LeaveRequestRepository


@dataclass(frozen=True)
class AdminStats:
    total_employees: int
    pending_leaves: int
    today_present: int


@dataclass(frozen=True)
class DashboardSummary:
    my_pending_leaves: int
    checked_in_today: bool
    recent_leaves: Sequence[LeaveRequest]
    admin: Optional[AdminStats] = None


class DashboardService:
    """Read-only counters for the landing page."""

    def __init__(
        self,
        profiles: ProfileRepository,
        leaves: LeaveRequestRepository,
        attendance: AttendanceRepository,
    ):
        self._profiles = profiles
        self._leaves = leaves
        self._attendance = attendance

    def summary(self, ctx: AuthorizationContext, *, today: Optional[date] = None) -> DashboardSummary:
        today = today or now_local().date()

        admin = None
        if ctx.is_admin:
            admin = AdminStats(
                total_employees=self._profiles.count(),
                pending_leaves=self._leaves.count(status=LeaveStatus.PENDING),
                today_present=self._attendance.count_for_date(
                    today, [AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY]
                ),
            )

        return DashboardSummary(
            my_pending_leaves=self._leaves.count(user_id=ctx.user_id, status=LeaveStatus.PENDING),
            checked_in_today=self._attendance.get_for_user_and_date(ctx.user_id, today) is not None,
            recent_leaves=list(
                self._leaves.list_requests(
                    user_id=None if ctx.is_admin else ctx.user_id,
                    limit=DEFAULT_RECENT_LIMIT,
                )
            ),
            admin=admin,
        )
