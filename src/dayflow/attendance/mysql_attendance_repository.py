from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.id, a.user_id, a.date, a.check_in, a.check_out, a.status, a.notes,
           a.created_at, a.updated_at,
           TRIM(CONCAT(COALESCE(p.first_name, ''), ' ', COALESCE(p.last_name, ''))) AS employee_name
    FROM attendance a
    JOIN profiles p ON p.id = a.user_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        user_id=int(r["user_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=r.get("employee_name") or None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.user_id=%s AND a.date=%s", (int(user_id), work_date))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        # The unique (user_id, date) index decides concurrent double check-ins.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(user_id, date, check_in, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(user_id), work_date, check_in, status.value),
                )
                record_id = int(cur.lastrowid)
                cur.execute(_SELECT + " WHERE a.id=%s", (record_id,))
                return _row_to_record(fetchone(cur))
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("You have already checked in today") from e
            raise

    def update_checkout(self, *, record_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET check_out=%s WHERE id=%s AND check_out IS NULL",
                (check_out, int(record_id)),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("a.user_id=%s")
            params.append(int(user_id))
        if start_date is not None:
            clauses.append("a.date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("a.date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY a.date DESC, a.user_id ASC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_for_date(self, work_date: date, statuses: Sequence[AttendanceStatus]) -> int:
        if not statuses:
            return 0
        placeholders = ",".join(["%s"] * len(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS n FROM attendance WHERE date=%s AND status IN ({placeholders})",
                tuple([work_date] + [s.value for s in statuses]),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
