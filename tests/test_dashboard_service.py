from datetime import date, datetime

from dayflow.core.enums import AttendanceStatus, LeaveStatus, LeaveType
from dayflow.dashboard.service import DashboardService

TODAY = date(2025, 6, 9)


def _seed(leaves, attendance):
    for user_id in (1, 1, 3):
        leaves.create(
            user_id=user_id,
            leave_type=LeaveType.PAID,
            start_date=date(2025, 6, 20),
            end_date=date(2025, 6, 21),
            remarks=None,
        )
    leaves.decide(request_id=3, status=LeaveStatus.APPROVED, reviewed_by=2)
    attendance.add(1, TODAY, check_in=datetime(2025, 6, 9, 9, 0))
    attendance.add(3, TODAY, status=AttendanceStatus.HALF_DAY)
    attendance.add(2, TODAY, status=AttendanceStatus.ABSENT)


def test_employee_summary(profiles, leaves, attendance, employee):
    _seed(leaves, attendance)

    summary = DashboardService(profiles, leaves, attendance).summary(employee, today=TODAY)

    assert summary.my_pending_leaves == 2
    assert summary.checked_in_today is True
    assert {r.user_id for r in summary.recent_leaves} == {1}
    assert summary.admin is None


def test_admin_summary(profiles, leaves, attendance, admin):
    _seed(leaves, attendance)

    summary = DashboardService(profiles, leaves, attendance).summary(admin, today=TODAY)

    assert summary.my_pending_leaves == 0
    assert len(summary.recent_leaves) == 3
    assert summary.admin.total_employees == 3
    assert summary.admin.pending_leaves == 2
    assert summary.admin.today_present == 2
