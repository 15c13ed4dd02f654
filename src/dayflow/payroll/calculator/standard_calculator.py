from __future__ import annotations

from decimal import Decimal

from ..model import ZERO, PayrollComponents
from .base import PayrollCalculator


def _d(value) -> Decimal:
    # Nullable DB columns count as zero, like COALESCE in the generated column.
    return Decimal(value) if value is not None else ZERO


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: basic + allowances - tax - other deductions.

    Must stay identical to the ``payroll.net_salary`` generated column.
    """

    def total_earnings(self, components: PayrollComponents) -> Decimal:
        return (
            _d(components.basic_salary)
            + _d(components.housing_allowance)
            + _d(components.transport_allowance)
            + _d(components.other_allowances)
        )

    def total_deductions(self, components: PayrollComponents) -> Decimal:
        return _d(components.tax_deduction) + _d(components.other_deductions)


def compute_net_salary(components: PayrollComponents) -> Decimal:
    return StandardPayrollCalculator().net_salary(components).quantize(Decimal("0.01"))
