from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import PayrollComponents


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def total_earnings(self, components: PayrollComponents) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def total_deductions(self, components: PayrollComponents) -> Decimal:
        raise NotImplementedError

    def net_salary(self, components: PayrollComponents) -> Decimal:
        return self.total_earnings(components) - self.total_deductions(components)
