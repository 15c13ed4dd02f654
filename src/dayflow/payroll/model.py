from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

ZERO = Decimal("0.00")

COMPONENT_FIELDS = (
    "basic_salary",
    "housing_allowance",
    "transport_allowance",
    "other_allowances",
    "tax_deduction",
    "other_deductions",
)


@dataclass(frozen=True)
class PayrollComponents:
    """Compensation inputs. Net salary is derived, never part of the input."""

    basic_salary: Decimal = ZERO
    housing_allowance: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    other_allowances: Decimal = ZERO
    tax_deduction: Decimal = ZERO
    other_deductions: Decimal = ZERO


@dataclass(frozen=True)
class PayrollRecord:
    id: int
    user_id: int
    components: PayrollComponents
    net_salary: Decimal
    effective_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollSummary:
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal
