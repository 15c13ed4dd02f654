from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import AuthIdentity, Profile, SignupMetadata


class IdentityRepository(Protocol):
    """Credentials store (step 1 of signup)."""

    def get_by_id(self, identity_id: int) -> Optional[AuthIdentity]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[AuthIdentity]:
        raise NotImplementedError

    def create_identity(self, *, email: str, password_hash: str, metadata: SignupMetadata) -> int:
        """Raises ConflictError when the email is already registered."""

        raise NotImplementedError

    def restart_identity(self, identity_id: int, *, password_hash: str, metadata: SignupMetadata) -> None:
        """Replace credentials and signup metadata of an identity that has no profile yet."""

        raise NotImplementedError

    def delete_identity(self, identity_id: int) -> None:
        raise NotImplementedError


class ProfileRepository(Protocol):
    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        profile_id: int,
        employee_id: str,
        email: str,
        role: Role,
        first_name: Optional[str],
        last_name: Optional[str],
    ) -> Profile:
        """Raises ConflictError on a duplicate id or employee id."""

        raise NotImplementedError

    def update_profile(self, profile_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
