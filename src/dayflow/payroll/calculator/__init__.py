from .base import PayrollCalculator
from .standard_calculator import StandardPayrollCalculator, compute_net_salary

__all__ = ["PayrollCalculator", "StandardPayrollCalculator", "compute_net_salary"]
