"""Audit log of user actions (login, logout)."""

import logging

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volterra.models.user import UserActivity

logger = logging.getLogger(__name__)

DETAILS_MAX_LEN = 500
IP_ADDRESS_MAX_LEN = 100
USER_AGENT_MAX_LEN = 255


def client_ip(request: Request) -> str:
    """Client address from proxy headers, falling back to the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


def log_user_activity(
    db: Session,
    user_id: int,
    action: str,
    details: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """
    Persist one activity row. Never raises: a failed write is rolled back and
    logged so that auditing cannot break the request that triggered it.
    """
    try:
        db.add(
            UserActivity(
                user_id=user_id,
                action=action,
                details=details[:DETAILS_MAX_LEN] if details else None,
                ip_address=ip_address[:IP_ADDRESS_MAX_LEN] if ip_address else None,
                user_agent=user_agent[:USER_AGENT_MAX_LEN] if user_agent else None,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to log user activity for user_id=%s action=%s", user_id, action
        )


def log_request_activity(
    db: Session, request: Request, user_id: int, action: str, details: str
) -> None:
    """log_user_activity with address and user agent taken from the request."""
    log_user_activity(
        db,
        user_id,
        action,
        details=details,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") or "unknown",
    )
