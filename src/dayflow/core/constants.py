"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 500
DEFAULT_RECENT_LIMIT = 5
REMARKS_MAX_LENGTH = 500

PASSWORD_MIN_LENGTH = 6
EMPLOYEE_ID_MIN_LENGTH = 3
NAME_MIN_LENGTH = 2

# Largest amount a DECIMAL(12, 2) payroll column holds.
MONEY_MAX = Decimal("9999999999.99")
