from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .calculator import compute_net_salary
from .model import COMPONENT_FIELDS, ZERO, PayrollComponents, PayrollRecord
from .repository import PayrollRepository

_SELECT_LATEST = """
    SELECT id, user_id, basic_salary, housing_allowance, transport_allowance, other_allowances,
           tax_deduction, other_deductions, net_salary, effective_date, created_at, updated_at
    FROM payroll
    WHERE user_id=%s
    ORDER BY effective_date DESC, id DESC
    LIMIT 1
"""


def _row_to_record(r: dict) -> PayrollRecord:
    components = PayrollComponents(**{f: r.get(f) if r.get(f) is not None else ZERO for f in COMPONENT_FIELDS})
    net = r.get("net_salary")
    return PayrollRecord(
        id=int(r["id"]),
        user_id=int(r["user_id"]),
        components=components,
        net_salary=net if net is not None else compute_net_salary(components),
        effective_date=r["effective_date"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_user(self, user_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_LATEST, (int(user_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def upsert_current(self, *, user_id: int, components: PayrollComponents, effective_date: date) -> PayrollRecord:
        values = tuple(getattr(components, f) for f in COMPONENT_FIELDS)

        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the current row so two admins saving at once serialize here.
            cur.execute(_SELECT_LATEST.replace("LIMIT 1", "LIMIT 1 FOR UPDATE"), (int(user_id),))
            current = fetchone(cur)

            if current:
                assignments = ", ".join(f"{f}=%s" for f in COMPONENT_FIELDS)
                cur.execute(
                    f"UPDATE payroll SET {assignments}, effective_date=%s WHERE id=%s",
                    values + (effective_date, int(current["id"])),
                )
            else:
                cur.execute(
                    f"""
                    INSERT INTO payroll(user_id, {", ".join(COMPONENT_FIELDS)}, effective_date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(user_id),) + values + (effective_date,),
                )

            cur.execute(_SELECT_LATEST, (int(user_id),))
            return _row_to_record(fetchone(cur))
