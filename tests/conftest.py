from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from dayflow.attendance.model import AttendanceRecord
from dayflow.container import build_services
from dayflow.core.enums import AttendanceStatus, LeaveStatus, Role
from dayflow.core.exceptions import ConflictError
from dayflow.identity.authorization import AuthorizationContext
from dayflow.identity.model import AuthIdentity, Profile
from dayflow.leave.model import LeaveRequest
from dayflow.main import create_app
from dayflow.payroll.calculator import compute_net_salary
from dayflow.payroll.model import PayrollRecord


class InMemoryIdentities:
    def __init__(self):
        self._by_id: dict[int, AuthIdentity] = {}
        self._next_id = 100

    def get_by_id(self, identity_id):
        return self._by_id.get(int(identity_id))

    def get_by_email(self, email):
        return next((i for i in self._by_id.values() if i.email == email), None)

    def create_identity(self, *, email, password_hash, metadata):
        if self.get_by_email(email):
            raise ConflictError("An account with this email already exists")
        self._next_id += 1
        self._by_id[self._next_id] = AuthIdentity(
            id=self._next_id, email=email, password_hash=password_hash, metadata=metadata
        )
        return self._next_id

    def restart_identity(self, identity_id, *, password_hash, metadata):
        current = self._by_id[int(identity_id)]
        self._by_id[current.id] = replace(current, password_hash=password_hash, metadata=metadata)

    def delete_identity(self, identity_id):
        self._by_id.pop(int(identity_id), None)


class InMemoryProfiles:
    def __init__(self):
        self._by_id: dict[int, Profile] = {}
        self.fail_next_create = False

    def add(self, profile_id: int, role: Role = Role.EMPLOYEE, **fields) -> Profile:
        profile = Profile(
            id=profile_id,
            employee_id=fields.pop("employee_id", f"EMP{profile_id:03d}"),
            email=fields.pop("email", f"user{profile_id}@example.com"),
            role=role,
            **fields,
        )
        self._by_id[profile_id] = profile
        return profile

    def get_by_id(self, profile_id):
        return self._by_id.get(int(profile_id))

    def get_by_employee_id(self, employee_id):
        return next((p for p in self._by_id.values() if p.employee_id == employee_id), None)

    def create_profile(self, *, profile_id, employee_id, email, role, first_name, last_name):
        if self.fail_next_create:
            self.fail_next_create = False
            raise RuntimeError("database went away")
        if int(profile_id) in self._by_id or any(p.employee_id == employee_id for p in self._by_id.values()):
            raise ConflictError("Profile or employee ID already exists")
        return self.add(
            int(profile_id),
            role,
            employee_id=employee_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
        )

    def update_profile(self, profile_id, changes):
        current = self._by_id.get(int(profile_id))
        if not current:
            return False
        self._by_id[int(profile_id)] = replace(current, **dict(changes))
        return True

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda p: (p.first_name or "", p.last_name or "", p.id))

    def count(self):
        return len(self._by_id)


class InMemoryLeaves:
    def __init__(self, *, clock: Optional[datetime] = None):
        self._by_id: dict[int, LeaveRequest] = {}
        self._next_id = 0
        self._clock = clock or datetime(2025, 6, 1, 8, 0)
        self.decide_calls = 0

    def create(self, *, user_id, leave_type, start_date, end_date, remarks):
        self._next_id += 1
        req = LeaveRequest(
            id=self._next_id,
            user_id=int(user_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            status=LeaveStatus.PENDING,
            created_at=self._clock + timedelta(minutes=self._next_id),
            remarks=remarks,
        )
        self._by_id[req.id] = req
        return req

    def get_by_id(self, request_id):
        return self._by_id.get(int(request_id))

    def list_requests(self, *, user_id=None, status=None, limit=500):
        items = [
            r
            for r in self._by_id.values()
            if (user_id is None or r.user_id == int(user_id)) and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return items[:limit]

    def count(self, *, user_id=None, status=None):
        return len(self.list_requests(user_id=user_id, status=status))

    def decide(self, *, request_id, status, reviewed_by, admin_comments=None):
        self.decide_calls += 1
        req = self._by_id.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self._by_id[req.id] = replace(
            req,
            status=status,
            reviewed_by=int(reviewed_by),
            reviewed_at=datetime(2025, 6, 9, 10, 0),
            admin_comments=admin_comments,
        )
        return True


class InMemoryAttendance:
    def __init__(self):
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def get_for_user_and_date(self, user_id, work_date):
        return self._by_user_date.get((int(user_id), work_date))

    def create_checkin(self, *, user_id, work_date, check_in, status):
        key = (int(user_id), work_date)
        if key in self._by_user_date:
            raise ConflictError("You have already checked in today")
        self._id += 1
        rec = AttendanceRecord(id=self._id, user_id=int(user_id), date=work_date, status=status, check_in=check_in)
        self._by_user_date[key] = rec
        return rec

    def update_checkout(self, *, record_id, check_out):
        for k, v in list(self._by_user_date.items()):
            if v.id == record_id and v.check_out is None:
                self._by_user_date[k] = replace(v, check_out=check_out)
                return True
        return False

    def add(self, user_id: int, work_date: date, *, status=AttendanceStatus.PRESENT, check_in=None, check_out=None):
        self._id += 1
        rec = AttendanceRecord(
            id=self._id, user_id=user_id, date=work_date, status=status, check_in=check_in, check_out=check_out
        )
        self._by_user_date[(user_id, work_date)] = rec
        return rec

    def list_records(self, *, user_id=None, start_date=None, end_date=None, limit=500):
        items = [
            r
            for r in self._by_user_date.values()
            if (user_id is None or r.user_id == int(user_id))
            and (start_date is None or r.date >= start_date)
            and (end_date is None or r.date <= end_date)
        ]
        items.sort(key=lambda r: (-r.date.toordinal(), r.user_id))
        return items[:limit]

    def count_for_date(self, work_date, statuses):
        return sum(1 for (_, d), r in self._by_user_date.items() if d == work_date and r.status in statuses)


class InMemoryPayroll:
    def __init__(self):
        self.rows: list[PayrollRecord] = []

    def get_latest_for_user(self, user_id):
        rows = [r for r in self.rows if r.user_id == int(user_id)]
        rows.sort(key=lambda r: (r.effective_date, r.id), reverse=True)
        return rows[0] if rows else None

    def upsert_current(self, *, user_id, components, effective_date):
        current = self.get_latest_for_user(user_id)
        if current:
            updated = replace(
                current,
                components=components,
                net_salary=compute_net_salary(components),
                effective_date=effective_date,
            )
            self.rows[self.rows.index(current)] = updated
            return updated
        record = PayrollRecord(
            id=len(self.rows) + 1,
            user_id=int(user_id),
            components=components,
            net_salary=compute_net_salary(components),
            effective_date=effective_date,
        )
        self.rows.append(record)
        return record


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 6, 9, 9, 0, 0)


@pytest.fixture
def identities() -> InMemoryIdentities:
    return InMemoryIdentities()


@pytest.fixture
def profiles() -> InMemoryProfiles:
    repo = InMemoryProfiles()
    repo.add(1, Role.EMPLOYEE, first_name="Alice", last_name="Nguyen")
    repo.add(2, Role.ADMIN, first_name="Bob", last_name="Tran", employee_id="ADM002")
    repo.add(3, Role.EMPLOYEE, first_name="Xuan", last_name="Le")
    return repo


@pytest.fixture
def leaves() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def payroll() -> InMemoryPayroll:
    return InMemoryPayroll()


@pytest.fixture
def employee(profiles) -> AuthorizationContext:
    return AuthorizationContext(profiles.get_by_id(1))


@pytest.fixture
def admin(profiles) -> AuthorizationContext:
    return AuthorizationContext(profiles.get_by_id(2))


@pytest.fixture
def other_employee(profiles) -> AuthorizationContext:
    return AuthorizationContext(profiles.get_by_id(3))


@pytest.fixture
def container(identities, profiles, leaves, attendance, payroll):
    return build_services(
        identities_repo=identities,
        profiles_repo=profiles,
        leave_repo=leaves,
        attendance_repo=attendance,
        payroll_repo=payroll,
    )


@pytest.fixture
def client(container):
    app = create_app(settings_module="dayflow.config.testing", container=container)
    return app.test_client()
