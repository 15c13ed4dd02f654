from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = (
    "id, employee_id, email, role, first_name, last_name, phone, address, "
    "department, position, hire_date, profile_picture_url, created_at, updated_at"
)

# Columns an UPDATE may touch; the service decides who may touch which.
UPDATABLE_COLUMNS = frozenset(
    {
        "first_name",
        "last_name",
        "phone",
        "address",
        "department",
        "position",
        "hire_date",
        "profile_picture_url",
        "role",
    }
)


def _row_to_profile(r: dict) -> Profile:
    return Profile(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        email=r["email"],
        role=Role(r["role"]),
        first_name=r.get("first_name"),
        last_name=r.get("last_name"),
        phone=r.get("phone"),
        address=r.get("address"),
        department=r.get("department"),
        position=r.get("position"),
        hire_date=r.get("hire_date"),
        profile_picture_url=r.get("profile_picture_url"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (int(profile_id),))
            r = fetchone(cur)
            return _row_to_profile(r) if r else None

    def get_by_employee_id(self, employee_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _row_to_profile(r) if r else None

    def create_profile(
        self,
        *,
        profile_id: int,
        employee_id: str,
        email: str,
        role: Role,
        first_name: Optional[str],
        last_name: Optional[str],
    ) -> Profile:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO profiles(id, employee_id, email, role, first_name, last_name)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(profile_id), employee_id, email, role.value, first_name, last_name),
                )
                cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (int(profile_id),))
                return _row_to_profile(fetchone(cur))
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("Profile or employee ID already exists") from e
            raise

    def update_profile(self, profile_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported profile columns: {sorted(unknown)}")
        if not changes:
            return self.get_by_id(profile_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in changes)
        params = [v.value if isinstance(v, Role) else v for v in changes.values()]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE profiles SET {assignments} WHERE id=%s",
                tuple(params + [int(profile_id)]),
            )
            # rowcount is 0 when values are unchanged, so re-check existence.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS ok FROM profiles WHERE id=%s", (int(profile_id),))
            return fetchone(cur) is not None

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY first_name, last_name, id")
            return [_row_to_profile(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM profiles")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
