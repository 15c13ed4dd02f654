from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (user, date)."""

    id: int
    user_id: int
    date: date
    status: AttendanceStatus
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Filled by list queries that join the owner's profile.
    employee_name: Optional[str] = None


def duration_hours(record: AttendanceRecord) -> Optional[float]:
    """Worked hours between check-in and check-out, None while either is missing."""
    if record.check_in is None or record.check_out is None:
        return None
    return (record.check_out - record.check_in).total_seconds() / 3600


def format_duration(record: AttendanceRecord) -> str:
    hours = duration_hours(record)
    if hours is None:
        return "-"
    return f"{hours:.1f}h"
