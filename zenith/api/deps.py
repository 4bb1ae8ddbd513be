"""
API dependency injection module.

Request-scoped dependencies for database sessions, the acting identity and
paging parameters.
"""

from typing import Callable, Optional

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from zenith.core.config import settings
from zenith.core.exceptions import UnauthorizedError
from zenith.db.session import get_db
from zenith.models import Role
from zenith.services.auth import AuthService
from zenith.services.authorization import Actor, ensure_role
from zenith.services.base import PageParams

# The token endpoint is specifically for Swagger UI authentication.
# auto_error is off so a missing header means "anonymous" instead of 401.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/token", auto_error=False)


def get_optional_actor(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[Actor]:
    """
    Resolve the caller's identity if a bearer token was sent.

    Returns:
        Actor, or None for anonymous requests

    Raises:
        UnauthorizedError: If a token was sent but is invalid or expired
    """
    return AuthService.resolve_actor(db, token)


def get_current_actor(actor: Optional[Actor] = Depends(get_optional_actor)) -> Actor:
    if actor is None:
        raise UnauthorizedError("Authentication required")
    return actor


def require_roles(*roles: Role) -> Callable[..., Actor]:
    """Dependency factory gating a route to the given roles."""

    def dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        ensure_role(actor, *roles)
        return actor

    return dependency


require_admin = require_roles(Role.ADMIN)
require_staff = require_roles(Role.ADMIN, Role.MODERATOR)


def get_page_params(
    page: int = Query(0, ge=0, description="Page number, starting at 0"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"),
    sort_by: str = Query("createdAt", alias="sortBy", description="Field to sort by"),
    sort_direction: str = Query("asc", alias="sortDirection", description="asc or desc"),
) -> PageParams:
    return PageParams(page=page, size=size, sort_by=sort_by, sort_direction=sort_direction)
