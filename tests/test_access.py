# =============================================================================
# tests/test_access.py - Role-Tier Access Check Tests
# =============================================================================
# Run with: pytest tests/test_access.py -v
# =============================================================================

from uuid import uuid4

import pytest

from app.auth.models import AuthUser
from app.exceptions import ForbiddenError, UnauthorizedError
from core import access
from core.models.user import Role


def actor(role: Role) -> AuthUser:
    return AuthUser(id=uuid4(), email=f"{role.value}@example.com", role=role)


ALL_ROLES = [Role.USER, Role.ADMIN, Role.SUPER_ADMIN]


class TestRoleOrder:
    def test_total_order(self):
        assert Role.USER.rank < Role.ADMIN.rank < Role.SUPER_ADMIN.rank

    @pytest.mark.parametrize("role,expected", [
        (Role.USER, False),
        (Role.ADMIN, True),
        (Role.SUPER_ADMIN, True),
    ])
    def test_at_least_admin(self, role, expected):
        assert role.at_least(Role.ADMIN) is expected
        assert access.is_admin(actor(role)) is expected


class TestRoleGates:
    def test_require_admin_rejects_user(self):
        with pytest.raises(UnauthorizedError):
            access.require_admin(actor(Role.USER))

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.SUPER_ADMIN])
    def test_require_admin_accepts_admins(self, role):
        access.require_admin(actor(role))

    @pytest.mark.parametrize("role", [Role.USER, Role.ADMIN])
    def test_require_super_admin(self, role):
        with pytest.raises(UnauthorizedError):
            access.require_super_admin(actor(role))

        access.require_super_admin(actor(Role.SUPER_ADMIN))

    def test_owner_or_admin(self):
        owner = actor(Role.USER)

        access.ensure_owner_or_admin(owner, owner.id, "model")
        access.ensure_owner_or_admin(actor(Role.ADMIN), owner.id, "model")
        with pytest.raises(UnauthorizedError):
            access.ensure_owner_or_admin(actor(Role.USER), owner.id, "model")

    def test_owner_match_ignores_id_type(self):
        owner = actor(Role.USER)

        access.ensure_owner_or_admin(owner, str(owner.id), "profile")


class TestModerateUser:
    """ban / unban / delete tier rules."""

    @pytest.mark.parametrize("caller_role", ALL_ROLES)
    def test_super_admin_target_always_forbidden(self, caller_role):
        with pytest.raises(ForbiddenError):
            access.ensure_can_moderate_user(actor(caller_role), actor(Role.SUPER_ADMIN))

    def test_admin_cannot_moderate_admin(self):
        with pytest.raises(ForbiddenError):
            access.ensure_can_moderate_user(actor(Role.ADMIN), actor(Role.ADMIN))

    def test_super_admin_can_moderate_admin(self):
        access.ensure_can_moderate_user(actor(Role.SUPER_ADMIN), actor(Role.ADMIN))

    @pytest.mark.parametrize("caller_role", [Role.ADMIN, Role.SUPER_ADMIN])
    def test_admins_can_moderate_users(self, caller_role):
        access.ensure_can_moderate_user(actor(caller_role), actor(Role.USER))

    @pytest.mark.parametrize("target_role", [Role.USER, Role.ADMIN])
    def test_user_is_unauthorized(self, target_role):
        with pytest.raises(UnauthorizedError):
            access.ensure_can_moderate_user(actor(Role.USER), actor(target_role))


class TestChangeRole:
    def test_super_admin_grants_admin(self):
        access.ensure_can_change_role(actor(Role.SUPER_ADMIN), actor(Role.USER), Role.ADMIN)

    def test_super_admin_revokes_admin(self):
        access.ensure_can_change_role(actor(Role.SUPER_ADMIN), actor(Role.ADMIN), Role.USER)

    @pytest.mark.parametrize("caller_role", [Role.USER, Role.ADMIN])
    def test_only_super_admin(self, caller_role):
        with pytest.raises(UnauthorizedError):
            access.ensure_can_change_role(actor(caller_role), actor(Role.USER), Role.ADMIN)

    @pytest.mark.parametrize("target_role", [Role.USER, Role.ADMIN])
    def test_cannot_promote_to_super_admin(self, target_role):
        with pytest.raises(ForbiddenError):
            access.ensure_can_change_role(actor(Role.SUPER_ADMIN), actor(target_role), Role.SUPER_ADMIN)

    def test_super_admin_role_is_fixed(self):
        with pytest.raises(ForbiddenError):
            access.ensure_can_change_role(actor(Role.SUPER_ADMIN), actor(Role.SUPER_ADMIN), Role.USER)

    def test_cannot_change_own_role(self):
        me = actor(Role.SUPER_ADMIN)
        with pytest.raises(ForbiddenError):
            access.ensure_can_change_role(me, me, Role.ADMIN)
