"""Dayflow HR package.

Feature modules (identity, leave, attendance, payroll, dashboard) each carry a
model, a repository protocol with its MySQL implementation, a service layer and
a thin Flask controller.
"""

__version__ = "0.1.0"
