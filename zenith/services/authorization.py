"""
Authorization predicates evaluated at the start of service methods.

The acting identity is always passed in explicitly as an ``Actor``; nothing
here reads request state.
"""

from dataclasses import dataclass
from typing import Optional

from zenith.core.exceptions import ForbiddenError, UnauthorizedError
from zenith.models.enums import Role

STAFF_ROLES = (Role.ADMIN, Role.MODERATOR)


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""

    user_id: int
    username: str
    role: Role

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(user_id=user.id, username=user.username, role=Role(user.role))


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""


def is_staff(actor: Optional[Actor]) -> bool:
    return actor is not None and actor.role in STAFF_ROLES


def has_role(actor: Optional[Actor], *roles: Role) -> bool:
    return actor is not None and actor.role in roles


def can_modify(actor: Optional[Actor], owner_id: int, resource: str = "resource") -> Decision:
    """Author, ADMIN and MODERATOR may edit or delete a post or comment."""
    if actor is None:
        return Decision(False, "Authentication required")
    if actor.user_id == owner_id:
        return Decision(True, "owner")
    if actor.role in STAFF_ROLES:
        return Decision(True, actor.role.value.lower())
    return Decision(False, f"You do not have permission to modify this {resource}")


def ensure_can_modify(actor: Optional[Actor], owner_id: int, resource: str = "resource") -> Decision:
    decision = can_modify(actor, owner_id, resource)
    if not decision.allowed:
        if actor is None:
            raise UnauthorizedError(decision.reason)
        raise ForbiddenError(decision.reason)
    return decision


def ensure_can_view(actor: Optional[Actor], owner_id: int, resource: str = "resource") -> None:
    """
    Gate read access to content that is not public.

    Anonymous callers get 401 so clients can prompt for login; signed-in
    callers without access get 403.
    """
    if actor is None:
        raise UnauthorizedError(f"Authentication required to view this {resource}")
    if not can_modify(actor, owner_id, resource).allowed:
        raise ForbiddenError(f"You do not have permission to view this {resource}")


def ensure_role(actor: Optional[Actor], *roles: Role) -> None:
    if actor is None:
        raise UnauthorizedError("Authentication required")
    if actor.role not in roles:
        raise ForbiddenError("You do not have permission to perform this action")
