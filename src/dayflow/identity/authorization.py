from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import Profile


def is_admin(profile: Profile) -> bool:
    return profile.role == Role.ADMIN


@dataclass(frozen=True)
class AuthorizationContext:
    """The resolved caller, passed as the first argument of every use case.

    Row ownership rule: a caller may act on a row when it owns it or is an admin.
    """

    profile: Profile

    @property
    def user_id(self) -> int:
        return self.profile.id

    @property
    def is_admin(self) -> bool:
        return is_admin(self.profile)

    def can_access(self, owner_id: int) -> bool:
        return self.user_id == int(owner_id) or self.is_admin

    def require_owner_or_admin(self, owner_id: int) -> None:
        if not self.can_access(owner_id):
            raise AuthorizationError("You do not have permission to access this record")

    def require_admin(self) -> None:
        if not self.is_admin:
            raise AuthorizationError("Only admins can perform this action")
