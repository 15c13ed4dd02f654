from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Optional, Sequence, Union

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_text
from ..core.constants import DEFAULT_LIST_LIMIT, REMARKS_MAX_LENGTH
from ..core.enums import LeaveStatus, LeaveType, ReviewDecision
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..identity.authorization import AuthorizationContext
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)

DateInput = Union[date, str, None]


def _coerce_date(value: DateInput, field_name: str, errors: Dict[str, str]) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        errors[field_name] = f"{field_name.replace('_', ' ').capitalize()} is required"
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        errors[field_name] = f"{field_name} must be YYYY-MM-DD"
        return None


class LeaveService:
    """Leave request workflow: submit, list, review.

    State machine: pending -> approved | rejected. Both targets are terminal;
    a review of anything but a pending request raises InvalidTransitionError.
    """

    def __init__(self, requests: LeaveRequestRepository, *, remarks_max_length: int = REMARKS_MAX_LENGTH):
        self._requests = requests
        self._remarks_max_length = int(remarks_max_length)

    def submit(
        self,
        ctx: AuthorizationContext,
        *,
        leave_type: Union[LeaveType, str],
        start_date: DateInput,
        end_date: DateInput,
        remarks: Optional[str] = None,
        today: Optional[date] = None,
    ) -> LeaveRequest:
        today = today or now_local().date()
        errors: Dict[str, str] = {}

        try:
            parsed_type = LeaveType(leave_type)
        except ValueError:
            errors["leave_type"] = "Leave type must be paid, sick or unpaid"
            parsed_type = None

        start = _coerce_date(start_date, "start_date", errors)
        end = _coerce_date(end_date, "end_date", errors)

        if start is not None and start < today:
            errors["start_date"] = "Start date cannot be in the past"
        if start is not None and end is not None and end < start:
            errors["end_date"] = "End date must be after or equal to start date"

        remarks = optional_text(remarks, "remarks", errors)
        if remarks is not None and len(remarks) > self._remarks_max_length:
            errors["remarks"] = f"Remarks must be at most {self._remarks_max_length} characters"

        if errors:
            logger.warning("leave submission rejected for user %s: %s", ctx.user_id, sorted(errors))
            raise ValidationError(errors=errors)

        created = self._requests.create(
            user_id=ctx.user_id,
            leave_type=parsed_type,
            start_date=start,
            end_date=end,
            remarks=remarks,
        )
        logger.info(
            "leave request %s submitted by %s (%s, %s..%s)",
            created.id,
            ctx.user_id,
            parsed_type.value,
            start.isoformat(),
            end.isoformat(),
        )
        return created

    def list_requests(
        self,
        ctx: AuthorizationContext,
        *,
        status: Union[LeaveStatus, str, None] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        parsed_status = None
        if status:
            try:
                parsed_status = LeaveStatus(status)
            except ValueError:
                raise ValidationError(errors={"status": "Unknown leave status"})

        return self._requests.list_requests(
            user_id=None if ctx.is_admin else ctx.user_id,
            status=parsed_status,
            limit=int(limit),
        )

    def get_request(self, ctx: AuthorizationContext, request_id: int) -> LeaveRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        ctx.require_owner_or_admin(req.user_id)
        return req

    def review(
        self,
        ctx: AuthorizationContext,
        *,
        request_id: int,
        decision: Union[ReviewDecision, str],
        comment: Optional[str] = None,
    ) -> LeaveRequest:
        ctx.require_admin()

        try:
            decision = ReviewDecision(decision)
        except ValueError:
            raise ValidationError(errors={"decision": "Decision must be approve or reject"})

        errors: Dict[str, str] = {}
        comment = optional_text(comment, "comment", errors)
        if errors:
            raise ValidationError(errors=errors)

        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if not req.is_pending:
            raise InvalidTransitionError(f"Leave request was already {req.status.value}")

        decided = self._requests.decide(
            request_id=req.id,
            status=decision.target_status,
            reviewed_by=ctx.user_id,
            admin_comments=comment,
        )
        if not decided:
            # Another reviewer got there between the read and the write.
            current = self._requests.get_by_id(req.id)
            if not current:
                raise NotFoundError("Leave request not found")
            raise InvalidTransitionError(f"Leave request was already {current.status.value}")

        logger.info("leave request %s %s by %s", req.id, decision.target_status.value, ctx.user_id)
        return self._requests.get_by_id(req.id)
