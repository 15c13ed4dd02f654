from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: the application-level user record.

    ``id`` is the id of the auth identity that owns it.
    """

    id: int
    employee_id: str
    email: str
    role: Role
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.email


@dataclass(frozen=True)
class SignupMetadata:
    """What the signup form hands over for the profile row."""

    employee_id: str
    role: Role
    first_name: str
    last_name: str

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "role": self.role.value,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SignupMetadata":
        return cls(
            employee_id=str(data["employee_id"]),
            role=Role(data.get("role") or Role.EMPLOYEE.value),
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
        )


@dataclass(frozen=True)
class AuthIdentity:
    id: int
    email: str
    password_hash: str
    metadata: Optional[SignupMetadata] = None
    created_at: Optional[datetime] = field(default=None, compare=False)
