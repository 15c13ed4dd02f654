from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Make dataclasses, enums, dates and decimals JSON friendly."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
        full_name = getattr(value, "full_name", None)
        if isinstance(full_name, str):
            out["full_name"] = full_name
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def error_response(e: DomainError):
    body = {"error": e.kind, "message": str(e)}
    if isinstance(e, ValidationError) and e.errors:
        body["fields"] = e.errors
    return jsonify(body), e.http_status


def internal_error(message: str):
    logger.exception(message)
    return jsonify({"error": "internal_error", "message": message}), 500


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "unauthenticated", "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper
