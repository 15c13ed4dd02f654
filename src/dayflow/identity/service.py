from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, require_email, require_min_length
from ..core.constants import EMPLOYEE_ID_MIN_LENGTH, NAME_MIN_LENGTH, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .authorization import AuthorizationContext
from .model import AuthIdentity, Profile, SignupMetadata
from .repository import IdentityRepository, ProfileRepository

logger = logging.getLogger(__name__)

SELF_EDITABLE_FIELDS = frozenset({"phone", "address", "profile_picture_url"})
ADMIN_EDITABLE_FIELDS = SELF_EDITABLE_FIELDS | frozenset(
    {"first_name", "last_name", "department", "position", "hire_date", "role"}
)


class IdentityResolver:
    """Turns a session user id into an AuthorizationContext."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def resolve(self, user_id: Optional[int]) -> AuthorizationContext:
        if user_id is None:
            raise AuthenticationError("Please sign in to continue")

        profile = self._profiles.get_by_id(int(user_id))
        if not profile:
            raise NotFoundError("Profile not found")
        return AuthorizationContext(profile)


class AuthService:
    """Use cases: sign up (identity then profile) and sign in."""

    def __init__(self, identities: IdentityRepository, profiles: ProfileRepository):
        self._identities = identities
        self._profiles = profiles

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        employee_id: str,
        first_name: str,
        last_name: str,
        role: str = Role.EMPLOYEE.value,
    ) -> Profile:
        errors: Dict[str, str] = {}
        values: Dict[str, str] = {}
        checks = (
            ("employee_id", lambda: require_min_length(employee_id or "", "employee_id", EMPLOYEE_ID_MIN_LENGTH)),
            ("first_name", lambda: require_min_length(first_name or "", "first_name", NAME_MIN_LENGTH)),
            ("last_name", lambda: require_min_length(last_name or "", "last_name", NAME_MIN_LENGTH)),
            ("email", lambda: require_email(email)),
        )
        for field_name, check in checks:
            try:
                values[field_name] = check()
            except ValidationError as e:
                errors.update(e.errors)

        if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
            errors["password"] = f"password must be at least {PASSWORD_MIN_LENGTH} characters"

        try:
            parsed_role = Role(role or Role.EMPLOYEE.value)
        except ValueError:
            errors["role"] = "role must be employee or admin"
            parsed_role = Role.EMPLOYEE

        if errors:
            raise ValidationError(errors=errors)

        metadata = SignupMetadata(
            employee_id=values["employee_id"],
            role=parsed_role,
            first_name=values["first_name"],
            last_name=values["last_name"],
        )
        if self._profiles.get_by_employee_id(metadata.employee_id):
            raise ConflictError("Employee ID is already in use")

        password_hash = generate_password_hash(password)
        existing = self._identities.get_by_email(values["email"])
        if existing and self._profiles.get_by_id(existing.id):
            raise ConflictError("An account with this email already exists")

        if existing:
            # Profile step never finished for this email; start it over.
            self._identities.restart_identity(existing.id, password_hash=password_hash, metadata=metadata)
            identity_id = existing.id
            logger.info("auth identity %s restarted for %s", identity_id, values["email"])
        else:
            identity_id = self._identities.create_identity(
                email=values["email"],
                password_hash=password_hash,
                metadata=metadata,
            )
            logger.info("auth identity %s created for %s", identity_id, values["email"])

        try:
            return self.ensure_profile(identity_id)
        except ConflictError:
            # Lost the employee id to a concurrent signup; free the email again.
            self._identities.delete_identity(identity_id)
            logger.warning("auth identity %s removed after employee id conflict", identity_id)
            raise

    def ensure_profile(self, identity_id: int) -> Profile:
        """Second signup step; safe to call again when it failed before."""
        existing = self._profiles.get_by_id(int(identity_id))
        if existing:
            return existing

        identity = self._identities.get_by_id(int(identity_id))
        if not identity:
            raise NotFoundError("Account not found")
        if identity.metadata is None:
            raise ValidationError("Account has no signup metadata to build a profile from")

        meta = identity.metadata
        try:
            profile = self._profiles.create_profile(
                profile_id=identity.id,
                employee_id=meta.employee_id,
                email=identity.email,
                role=meta.role,
                first_name=meta.first_name or None,
                last_name=meta.last_name or None,
            )
        except ConflictError:
            # A concurrent retry may have won the insert.
            existing = self._profiles.get_by_id(identity.id)
            if existing:
                return existing
            raise ConflictError(
                "Employee ID is already in use",
            ) from None

        logger.info("profile %s created (employee_id=%s, role=%s)", profile.id, profile.employee_id, profile.role.value)
        return profile

    def authenticate(self, email: str, password: str) -> Profile:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")
        identity: Optional[AuthIdentity] = self._identities.get_by_email(email.strip().lower())
        if not identity or not check_password_hash(identity.password_hash, password):
            logger.warning("failed sign-in for %s", email)
            raise AuthenticationError("Invalid email or password")

        return self.ensure_profile(identity.id)


class ProfileService:
    """Use cases: employee directory and profile editing."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def get_profile(self, ctx: AuthorizationContext, profile_id: int) -> Profile:
        ctx.require_owner_or_admin(profile_id)
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def list_profiles(self, ctx: AuthorizationContext) -> Sequence[Profile]:
        if not ctx.is_admin:
            return [ctx.profile]
        return list(self._profiles.list_all())

    def update_profile(self, ctx: AuthorizationContext, profile_id: int, changes: Mapping[str, Any]) -> Profile:
        ctx.require_owner_or_admin(profile_id)

        unknown = set(changes) - ADMIN_EDITABLE_FIELDS
        if unknown:
            raise ValidationError(errors={f: f"{f} cannot be changed" for f in sorted(unknown)})

        allowed = ADMIN_EDITABLE_FIELDS if ctx.is_admin else SELF_EDITABLE_FIELDS
        restricted = set(changes) - allowed
        if restricted:
            logger.warning("profile %s tried to change %s on %s", ctx.user_id, sorted(restricted), profile_id)
            raise AuthorizationError(f"You cannot change: {', '.join(sorted(restricted))}")

        cleaned = self._clean_changes(changes)
        if not cleaned:
            return self.get_profile(ctx, profile_id)
        if not self._profiles.update_profile(int(profile_id), cleaned):
            raise NotFoundError("Profile not found")

        logger.info("profile %s updated by %s (%s)", profile_id, ctx.user_id, ", ".join(sorted(changes)))
        return self.get_profile(ctx, profile_id)

    @staticmethod
    def _clean_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
        errors: Dict[str, str] = {}
        out: Dict[str, Any] = {}
        for key, value in changes.items():
            if key == "role":
                try:
                    out[key] = Role(value)
                except ValueError:
                    errors[key] = "role must be employee or admin"
            elif key == "hire_date":
                if value in (None, ""):
                    out[key] = None
                elif isinstance(value, date):
                    out[key] = value
                else:
                    try:
                        out[key] = parse_iso_date(str(value))
                    except ValueError:
                        errors[key] = "hire_date must be YYYY-MM-DD"
            elif key in ("first_name", "last_name"):
                text = optional_text(value, key, errors)
                if text is not None and len(text) < NAME_MIN_LENGTH:
                    errors[key] = f"{key} must be at least {NAME_MIN_LENGTH} characters"
                out[key] = text
            else:
                out[key] = optional_text(value, key, errors)
        if errors:
            raise ValidationError(errors=errors)
        return out
