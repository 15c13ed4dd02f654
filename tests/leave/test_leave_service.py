from __future__ import annotations

from datetime import date

import pytest

from dayflow.core.enums import LeaveStatus, LeaveType, ReviewDecision
from dayflow.core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from dayflow.leave.service import LeaveService

TODAY = date(2025, 6, 9)


def _submit(svc, ctx, **overrides):
    kwargs = dict(
        leave_type="sick",
        start_date=date(2025, 6, 10),
        end_date=date(2025, 6, 12),
        remarks="flu",
        today=TODAY,
    )
    kwargs.update(overrides)
    return svc.submit(ctx, **kwargs)


def test_submit_creates_pending_request_owned_by_caller(leaves, employee):
    req = _submit(LeaveService(leaves), employee)

    assert req.status == LeaveStatus.PENDING
    assert req.user_id == employee.user_id
    assert req.leave_type == LeaveType.SICK
    assert req.remarks == "flu"
    assert req.reviewed_by is None and req.reviewed_at is None


def test_submit_accepts_iso_strings_and_same_day(leaves, employee):
    req = _submit(LeaveService(leaves), employee, start_date="2025-06-09", end_date="2025-06-09", remarks="  ")

    assert req.start_date == TODAY
    assert req.days == 1
    assert req.remarks is None


@pytest.mark.parametrize(
    "overrides, field_name",
    [
        ({"start_date": date(2025, 6, 8), "end_date": date(2025, 6, 10)}, "start_date"),
        ({"start_date": date(2025, 6, 12), "end_date": date(2025, 6, 10)}, "end_date"),
        ({"leave_type": "vacation"}, "leave_type"),
        ({"remarks": "x" * 501}, "remarks"),
        ({"remarks": 5}, "remarks"),
        ({"remarks": ["sick"]}, "remarks"),
        ({"start_date": ""}, "start_date"),
        ({"end_date": "12/06/2025"}, "end_date"),
    ],
)
def test_submit_rejects_invalid_input_before_writing(leaves, employee, overrides, field_name):
    with pytest.raises(ValidationError) as exc:
        _submit(LeaveService(leaves), employee, **overrides)

    assert field_name in exc.value.errors
    assert leaves.count() == 0


def test_remarks_limit_is_configurable(leaves, employee):
    svc = LeaveService(leaves, remarks_max_length=10)

    with pytest.raises(ValidationError) as exc:
        _submit(svc, employee, remarks="x" * 11)
    assert exc.value.errors["remarks"] == "Remarks must be at most 10 characters"
    assert _submit(svc, employee, remarks="x" * 10).remarks == "x" * 10


def test_overlapping_requests_are_allowed(leaves, employee):
    svc = LeaveService(leaves)
    _submit(svc, employee)
    _submit(svc, employee)

    assert leaves.count(user_id=employee.user_id) == 2


def test_list_is_scoped_and_newest_first(leaves, employee, other_employee, admin):
    svc = LeaveService(leaves)
    first = _submit(svc, employee)
    other = _submit(svc, other_employee)
    second = _submit(svc, employee, leave_type="paid")

    assert [r.id for r in svc.list_requests(employee)] == [second.id, first.id]
    assert [r.id for r in svc.list_requests(admin)] == [second.id, other.id, first.id]


def test_list_status_filter(leaves, employee, admin):
    svc = LeaveService(leaves)
    a = _submit(svc, employee)
    b = _submit(svc, employee)
    svc.review(admin, request_id=a.id, decision="approve")

    assert [r.id for r in svc.list_requests(admin, status="pending")] == [b.id]
    with pytest.raises(ValidationError):
        svc.list_requests(admin, status="archived")


def test_scenario_approve_then_second_review_fails(leaves, employee, admin):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)

    reviewed = svc.review(admin, request_id=req.id, decision=ReviewDecision.APPROVE, comment="get well")

    assert reviewed.status == LeaveStatus.APPROVED
    assert reviewed.reviewed_by == admin.user_id
    assert reviewed.reviewed_at is not None
    assert reviewed.admin_comments == "get well"

    with pytest.raises(InvalidTransitionError):
        svc.review(admin, request_id=req.id, decision="reject")
    assert leaves.get_by_id(req.id).status == LeaveStatus.APPROVED


def test_reject_is_terminal(leaves, employee, admin):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)
    svc.review(admin, request_id=req.id, decision="reject")

    with pytest.raises(InvalidTransitionError):
        svc.review(admin, request_id=req.id, decision="approve")


def test_review_requires_admin(leaves, employee):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)

    with pytest.raises(AuthorizationError):
        svc.review(employee, request_id=req.id, decision="approve")

    current = leaves.get_by_id(req.id)
    assert current.status == LeaveStatus.PENDING
    assert current.reviewed_by is None and current.reviewed_at is None


def test_review_unknown_request_is_not_found(leaves, admin):
    with pytest.raises(NotFoundError):
        LeaveService(leaves).review(admin, request_id=42, decision="approve")


def test_review_rejects_unknown_decision(leaves, employee, admin):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)

    with pytest.raises(ValidationError):
        svc.review(admin, request_id=req.id, decision="maybe")


def test_concurrent_reviewer_loses(leaves, employee, admin):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)

    # Simulate another admin deciding between our read and our write.
    original_decide = leaves.decide

    def racing_decide(**kwargs):
        original_decide(request_id=kwargs["request_id"], status=LeaveStatus.REJECTED, reviewed_by=99)
        return original_decide(**kwargs)

    leaves.decide = racing_decide

    with pytest.raises(InvalidTransitionError):
        svc.review(admin, request_id=req.id, decision="approve")
    assert leaves.get_by_id(req.id).status == LeaveStatus.REJECTED


def test_get_request_checks_ownership(leaves, employee, other_employee, admin):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)

    assert svc.get_request(employee, req.id).id == req.id
    assert svc.get_request(admin, req.id).id == req.id
    with pytest.raises(AuthorizationError):
        svc.get_request(other_employee, req.id)


def test_review_comment_must_be_text(leaves, employee, admin):
    svc = LeaveService(leaves)
    req = _submit(svc, employee)

    with pytest.raises(ValidationError) as exc:
        svc.review(admin, request_id=req.id, decision="approve", comment={"text": "ok"})

    assert "comment" in exc.value.errors
    assert leaves.get_by_id(req.id).is_pending
