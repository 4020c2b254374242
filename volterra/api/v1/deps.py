"""Request-scoped dependencies: path id parsing, session resolution and role enforcement."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from volterra.core.config import get_settings
from volterra.core.database import get_db
from volterra.models.enums import UserRole
from volterra.schemas.auth import AuthUser
from volterra.services.roles import has_role, normalize_roles
from volterra.services.session import resolve_current_user

logger = logging.getLogger(__name__)

# Integer primary keys are 32-bit in the schema.
MAX_ID = 2**31 - 1


def parse_id(raw: str | None) -> int | None:
    """Parse a path id; anything other than a plain positive decimal in range yields None."""
    if raw is None:
        return None
    raw = raw.strip()
    if not raw or not raw.isascii() or not raw.isdigit():
        return None
    value = int(raw)
    if value < 1 or value > MAX_ID:
        return None
    return value


def id_or_404(raw: str, entity: str) -> int:
    """parse_id, folding malformed ids into the same 404 as a missing record."""
    value = parse_id(raw)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found",
        )
    return value


def get_session_token(request: Request) -> str | None:
    """Session cookie value of the current request, if any."""
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME)


def get_optional_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthUser | None:
    """
    Dependency: the logged-in user, or None when anonymous.

    Any failure while resolving is logged and answered with a generic 500,
    matching /auth/me.
    """
    try:
        return resolve_current_user(db, get_session_token(request))
    except Exception as e:
        logger.exception("Error resolving session")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify session",
        ) from e


def get_current_user(
    user: Annotated[AuthUser | None, Depends(get_optional_user)],
) -> AuthUser:
    """Dependency: require a valid session. Raises 401 when anonymous."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_roles(*roles: UserRole | str) -> Callable[[AuthUser], AuthUser]:
    """
    Build a dependency that admits only users whose role is in roles.

    Anonymous requests get 401 (from get_current_user); authenticated users
    with any other role get 403.
    """
    allowed = normalize_roles(roles)

    def dependency(
        current_user: Annotated[AuthUser, Depends(get_current_user)],
    ) -> AuthUser:
        if not has_role(current_user, allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return dependency


require_admin = require_roles(UserRole.SUPER_ADMIN, UserRole.ADMIN)
