"""Resolve the session cookie of an inbound request to the current user."""

import logging

import jwt
from sqlalchemy.orm import Session

from volterra.core.security import decode_session_token
from volterra.models.user import User
from volterra.schemas.auth import AuthUser

logger = logging.getLogger(__name__)


def resolve_current_user(db: Session, token: str | None) -> AuthUser | None:
    """
    Return the authenticated user for a session token, or None when anonymous.

    An invalid or expired token, a token without a usable subject, and a token
    whose user no longer exists all resolve to None. Name, role and image are
    read from the database so a role change applies on the next request.
    Database errors propagate to the caller.
    """
    if not token:
        return None

    try:
        payload = decode_session_token(token)
    except jwt.ExpiredSignatureError:
        logger.info("Expired session token presented")
        return None
    except jwt.PyJWTError as e:
        logger.warning("Invalid session token presented: %s", type(e).__name__)
        return None

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.warning("Session token without a valid subject")
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning("User id %s from a valid session token not found", user_id)
        return None

    return AuthUser(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        image=user.image,
    )
