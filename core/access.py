# =============================================================================
# core/access.py - Role-Tier Access Checks
# =============================================================================
# Gates which operations the services accept from a caller.
#
# Tiers are totally ordered: user < admin < super_admin.
#
#   require_admin            role in {admin, super_admin}      else Unauthorized
#   require_super_admin      role == super_admin               else Unauthorized
#   ensure_owner_or_admin    caller owns the entity or is admin else Unauthorized
#   ensure_can_moderate_user ban / unban / delete a user
#   ensure_can_change_role   grant / revoke / set a role
#
# Forbidden is reserved for tier rules on a specific (actor, target) pair;
# Unauthorized means the caller lacks the role or ownership outright.
# =============================================================================

import logging
from typing import Protocol
from uuid import UUID

from app.exceptions import ForbiddenError, UnauthorizedError
from core.models.user import Role

logger = logging.getLogger(__name__)


class Actor(Protocol):
    """Anything carrying an identity and a role: a token's claims or a User record."""
    id: UUID
    role: Role


def is_admin(actor: Actor) -> bool:
    return actor.role.at_least(Role.ADMIN)


def require_admin(actor: Actor) -> None:
    if not is_admin(actor):
        raise UnauthorizedError(
            "Admin role required",
            suggestion="Ask an administrator to perform this action",
        )


def require_super_admin(actor: Actor) -> None:
    if actor.role != Role.SUPER_ADMIN:
        raise UnauthorizedError("Super admin role required")


def ensure_owner_or_admin(actor: Actor, owner_id: UUID, resource: str) -> None:
    if str(actor.id) != str(owner_id) and not is_admin(actor):
        raise UnauthorizedError(
            f"Not allowed to modify this {resource}",
            suggestion=f"Only the {resource} owner or an admin can do this",
        )


def ensure_can_moderate_user(actor: Actor, target: Actor) -> None:
    """
    Check that actor may ban, unban or delete target.

    Raises:
        ForbiddenError: Target is the super admin (whoever asks), or target
            is an admin and the caller is not the super admin
        UnauthorizedError: Caller is not an admin
    """
    if target.role == Role.SUPER_ADMIN:
        raise ForbiddenError("The super admin cannot be moderated")

    require_admin(actor)

    if target.role == Role.ADMIN and actor.role != Role.SUPER_ADMIN:
        raise ForbiddenError(
            "Only the super admin can moderate an admin",
            suggestion="Ask the super admin to perform this action",
        )


def ensure_can_change_role(actor: Actor, target: Actor, new_role: Role) -> None:
    """
    Check that actor may set target's role to new_role.

    Only the super admin changes roles; the super admin's own role is
    fixed and no one else can be promoted to it.
    """
    require_super_admin(actor)

    if target.role == Role.SUPER_ADMIN:
        raise ForbiddenError("The super admin's role cannot be changed")
    if new_role == Role.SUPER_ADMIN:
        raise ForbiddenError("There can only be one super admin")
    if str(actor.id) == str(target.id):
        raise ForbiddenError("You cannot change your own role")
