"""
Authorization policy shared by every owned resource (todos, posts, attachments)
and by account administration.

Rules, in order:
  1. role-gated operation and the actor's role is not allowed -> DENY
  2. actor is ADMIN -> ALLOW
  3. actor owns the resource -> ALLOW
  4. otherwise -> DENY
An operation that passes the role gate and targets no owned resource is ALLOW.
Deleting one's own account is always DENY.
"""

from collections.abc import Collection
from enum import Enum
from typing import assert_never

from app.core.exceptions import ForbiddenError
from app.models.user import Role

ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})


class Decision(Enum):
    ALLOW = "allow"
    DENY = "deny"


def decide(
    actor_role: Role,
    actor_id: int,
    resource_owner_id: int | None = None,
    required_roles: Collection[Role] | None = None,
) -> Decision:
    """Pure ALLOW/DENY decision for one actor against one (optional) resource owner."""
    if required_roles is not None and actor_role not in required_roles:
        return Decision.DENY
    match actor_role:
        case Role.ADMIN:
            return Decision.ALLOW
        case Role.MODERATOR | Role.USER:
            if resource_owner_id is None:
                return Decision.ALLOW if required_roles is not None else Decision.DENY
            return Decision.ALLOW if actor_id == resource_owner_id else Decision.DENY
        case _:
            assert_never(actor_role)


def decide_account_deletion(actor_role: Role, actor_id: int, target_account_id: int) -> Decision:
    """Self-delete is refused before the role gate is even looked at."""
    if actor_id == target_account_id:
        return Decision.DENY
    return decide(actor_role, actor_id, required_roles=ADMIN_ONLY)


def visible_owner_id(actor_role: Role, actor_id: int) -> int | None:
    """Owner filter for list queries: None means every owner (ADMIN), else the actor's own id."""
    match actor_role:
        case Role.ADMIN:
            return None
        case Role.MODERATOR | Role.USER:
            return actor_id
        case _:
            assert_never(actor_role)


def ensure_allowed(decision: Decision, message: str = "Forbidden - Insufficient permissions") -> None:
    """Raise ForbiddenError unless the decision is ALLOW."""
    if decision is not Decision.ALLOW:
        raise ForbiddenError(message)
