from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import REMARKS_MAX_LENGTH
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .identity.mysql_identity_repository import MySQLIdentityRepository
from .identity.mysql_profile_repository import MySQLProfileRepository
from .identity.repository import IdentityRepository, ProfileRepository
from .identity.service import AuthService, IdentityResolver, ProfileService
from .leave.mysql_leave_repository import MySQLLeaveRequestRepository
from .leave.repository import LeaveRequestRepository
from .leave.service import LeaveService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    identities_repo: IdentityRepository
    profiles_repo: ProfileRepository
    leave_repo: LeaveRequestRepository
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository

    identity_resolver: IdentityResolver
    auth_service: AuthService
    profile_service: ProfileService
    leave_service: LeaveService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    identities_repo: IdentityRepository,
    profiles_repo: ProfileRepository,
    leave_repo: LeaveRequestRepository,
    attendance_repo: AttendanceRepository,
    payroll_repo: PayrollRepository,
    remarks_max_length: int = REMARKS_MAX_LENGTH,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    return Container(
        identities_repo=identities_repo,
        profiles_repo=profiles_repo,
        leave_repo=leave_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        identity_resolver=IdentityResolver(profiles_repo),
        auth_service=AuthService(identities_repo, profiles_repo),
        profile_service=ProfileService(profiles_repo),
        leave_service=LeaveService(leave_repo, remarks_max_length=remarks_max_length),
        attendance_service=AttendanceService(attendance_repo),
        payroll_service=PayrollService(payroll_repo, profiles_repo),
        dashboard_service=DashboardService(profiles_repo, leave_repo, attendance_repo),
        conn=conn,
    )


def build_container(*, db_config: dict, remarks_max_length: int = REMARKS_MAX_LENGTH) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        identities_repo=MySQLIdentityRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        leave_repo=MySQLLeaveRequestRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        remarks_max_length=remarks_max_length,
        conn=conn,
    )
