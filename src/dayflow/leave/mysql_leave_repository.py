from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_SELECT = """
    SELECT r.id, r.user_id, r.leave_type, r.start_date, r.end_date, r.remarks,
           r.status, r.admin_comments, r.reviewed_by, r.reviewed_at,
           r.created_at, r.updated_at,
           TRIM(CONCAT(COALESCE(p.first_name, ''), ' ', COALESCE(p.last_name, ''))) AS requester_name
    FROM leave_requests r
    JOIN profiles p ON p.id = r.user_id
"""


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        id=int(r["id"]),
        user_id=int(r["user_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        remarks=r.get("remarks"),
        admin_comments=r.get("admin_comments"),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        reviewed_at=r.get("reviewed_at"),
        updated_at=r.get("updated_at"),
        requester_name=r.get("requester_name") or None,
    )


def _filters(user_id: Optional[int], status: Optional[LeaveStatus]) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []

    if status is not None:
        clauses.append("r.status=%s")
        params.append(status.value)
    if user_id is not None:
        clauses.append("r.user_id=%s")
        params.append(int(user_id))

    return " AND ".join(clauses), params


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        remarks: Optional[str],
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, remarks, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), leave_type.value, start_date, end_date, remarks, LeaveStatus.PENDING.value),
            )
            request_id = int(cur.lastrowid)
            cur.execute(_SELECT + " WHERE r.id=%s", (request_id,))
            return _row_to_request(fetchone(cur))

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        where, params = _filters(user_id, status)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY r.created_at DESC, r.id DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def count(self, *, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> int:
        where, params = _filters(user_id, status)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM leave_requests r WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        admin_comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(), admin_comments=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    admin_comments,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
