from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "error"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` maps a field name to its message so forms can show them inline.
    """

    kind = "validation_error"
    http_status = 400

    def __init__(self, message: str = "", *, errors: Optional[Mapping[str, str]] = None):
        self.errors = dict(errors or {})
        if not message and self.errors:
            message = "; ".join(self.errors.values())
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when there is no valid caller (bad credentials or no session)."""

    kind = "unauthenticated"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"
    http_status = 403


class NotFoundError(DomainError):
    kind = "not_found"
    http_status = 404


class ConflictError(DomainError):
    """Raised on uniqueness violations (duplicate check-in, duplicate email)."""

    kind = "conflict"
    http_status = 409


class InvalidTransitionError(DomainError):
    """Raised when a leave request is reviewed outside the pending state."""

    kind = "invalid_transition"
    http_status = 409
