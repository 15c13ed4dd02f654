from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence, Union

from ..common.datetime_utils import now_local, range_bounds
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceRange, AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..identity.authorization import AuthorizationContext
from .model import AttendanceRecord, duration_hours, format_duration
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.HALF_DAY: "Half Day",
    AttendanceStatus.LEAVE: "On Leave",
}


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def check_in(
        self,
        ctx: AuthorizationContext,
        *,
        work_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        work_date = work_date or now.date()

        try:
            record = self._attendance.create_checkin(
                user_id=ctx.user_id,
                work_date=work_date,
                check_in=now,
                status=AttendanceStatus.PRESENT,
            )
        except ConflictError:
            logger.warning("duplicate check-in for user %s on %s", ctx.user_id, work_date.isoformat())
            raise

        logger.info("user %s checked in at %s", ctx.user_id, now.isoformat(timespec="seconds"))
        return record

    def check_out(
        self,
        ctx: AuthorizationContext,
        *,
        work_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        work_date = work_date or now.date()

        record = self._attendance.get_for_user_and_date(ctx.user_id, work_date)
        if not record:
            raise NotFoundError("You have not checked in today")
        if record.check_out is not None:
            raise ConflictError("You have already checked out today")
        if record.check_in is None or now < record.check_in:
            raise ValidationError(errors={"check_out": "Check-out cannot be before check-in"})

        if not self._attendance.update_checkout(record_id=record.id, check_out=now):
            # Another check-out landed between the read and the write.
            raise ConflictError("You have already checked out today")

        logger.info("user %s checked out at %s", ctx.user_id, now.isoformat(timespec="seconds"))
        return self._attendance.get_for_user_and_date(ctx.user_id, work_date)

    def get_today(self, ctx: AuthorizationContext, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        today = (now or now_local()).date()
        return self._attendance.get_for_user_and_date(ctx.user_id, today)

    def list_records(
        self,
        ctx: AuthorizationContext,
        *,
        range_: Union[AttendanceRange, str] = AttendanceRange.WEEK,
        today: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        try:
            range_ = AttendanceRange(range_)
        except ValueError:
            raise ValidationError(errors={"range": "Range must be week, month or all"})

        bounds = range_bounds(range_, today or now_local().date())
        start, end = bounds if bounds else (None, None)

        return self._attendance.list_records(
            user_id=None if ctx.is_admin else ctx.user_id,
            start_date=start,
            end_date=end,
            limit=int(limit),
        )

    def to_row(self, r: AttendanceRecord) -> dict:
        hours = duration_hours(r)
        return {
            "id": r.id,
            "user_id": r.user_id,
            "employee_name": r.employee_name or "",
            "date": r.date.strftime("%Y-%m-%d"),
            "check_in": r.check_in.strftime("%H:%M:%S") if r.check_in else "-",
            "check_out": r.check_out.strftime("%H:%M:%S") if r.check_out else "-",
            "status": r.status.value,
            "status_label": STATUS_LABELS.get(r.status, r.status.value),
            "hours": round(hours, 2) if hours is not None else None,
            "duration": format_duration(r),
            "notes": r.notes or "",
        }
