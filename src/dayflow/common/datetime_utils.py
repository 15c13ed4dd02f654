from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from ..core.enums import AttendanceRange


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def week_bounds(today: date) -> Tuple[date, date]:
    """Sunday..Saturday week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_bounds(today: date) -> Tuple[date, date]:
    start = today.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def range_bounds(range_: AttendanceRange, today: date) -> Optional[Tuple[date, date]]:
    """Inclusive date bounds for a list filter, None for all time."""
    if range_ == AttendanceRange.WEEK:
        return week_bounds(today)
    if range_ == AttendanceRange.MONTH:
        return month_bounds(today)
    return None
