from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ..core.constants import MONEY_MAX
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value.strip()) < min_len:
        message = f"{field_name} must be at least {min_len} characters"
        raise ValidationError(message, errors={field_name: message})
    return value.strip()


def require_email(value: str, field_name: str = "email") -> str:
    value = value.strip().lower() if isinstance(value, str) else ""
    if not _EMAIL_RE.match(value):
        raise ValidationError("Invalid email address", errors={field_name: "Invalid email address"})
    return value


def optional_text(value: Any, field_name: str, errors: Dict[str, str]) -> Optional[str]:
    """Strip free text to None when blank; records a field error for non-strings."""
    if value is None:
        return None
    if not isinstance(value, str):
        errors[field_name] = f"{field_name} must be text"
        return None
    return value.strip() or None


def parse_money(value: Any, field_name: str, errors: Dict[str, str]) -> Decimal:
    """Parse a non-negative amount; records a field error instead of raising."""
    if value is None or value == "":
        return Decimal("0.00")
    if isinstance(value, bool):
        errors[field_name] = f"{field_name} must be a number"
        return Decimal("0.00")
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValueError(value)
        if abs(amount) <= MONEY_MAX:
            amount = amount.quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        errors[field_name] = f"{field_name} must be a number"
        return Decimal("0.00")
    if abs(amount) > MONEY_MAX:
        errors[field_name] = f"{field_name} cannot exceed {MONEY_MAX}"
        return Decimal("0.00")
    if amount < 0:
        errors[field_name] = f"{field_name} cannot be negative"
    return amount
