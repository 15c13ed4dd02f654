from __future__ import annotations

import pytest

from dayflow.core.exceptions import AuthorizationError
from dayflow.identity.authorization import is_admin


def test_is_admin_is_a_role_check(profiles):
    assert is_admin(profiles.get_by_id(2))
    assert not is_admin(profiles.get_by_id(1))


def test_owner_or_admin_rule(employee, admin):
    assert employee.can_access(1)
    assert not employee.can_access(3)
    assert admin.can_access(1)
    assert admin.can_access(3)

    employee.require_owner_or_admin(1)
    with pytest.raises(AuthorizationError):
        employee.require_owner_or_admin(3)


def test_require_admin(employee, admin):
    admin.require_admin()
    with pytest.raises(AuthorizationError):
        employee.require_admin()
