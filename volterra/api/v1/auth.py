"""Cookie-session login/logout and the current-user endpoints (/me, /session)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volterra.api.v1.deps import get_session_token
from volterra.core.config import get_settings
from volterra.core.database import get_db
from volterra.core.security import create_session_token, verify_password
from volterra.models.enums import UserStatus
from volterra.models.user import User
from volterra.schemas.auth import (
    AuthUser,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    SessionResponse,
)
from volterra.services.activity import log_request_activity
from volterra.services.session import resolve_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_REDIRECT = "/auth/login"

_INACTIVE_MESSAGES = {
    UserStatus.PENDING.value: "Please verify your email before logging in",
}
_DEFAULT_INACTIVE_MESSAGE = "Your account is not active. Please contact an administrator."


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid email or password",
    )


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password and set the session cookie.

    Unknown email and wrong password share one message so accounts cannot be enumerated.
    """
    email = body.email.strip()
    if not email or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as e:
        logger.exception("Login lookup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e

    if user is None:
        logger.info("Login failed: user not found", extra={"email": email})
        raise _invalid_credentials()
    if user.status != UserStatus.ACTIVE.value:
        logger.info(
            "Login failed: user not active",
            extra={"email": email, "user_status": user.status},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_INACTIVE_MESSAGES.get(user.status, _DEFAULT_INACTIVE_MESSAGE),
        )
    if not verify_password(body.password, user.password_hash):
        logger.info("Login failed: invalid password", extra={"email": email})
        raise _invalid_credentials()

    settings = get_settings()
    token = create_session_token(user_id=user.id, email=user.email, role=user.role)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )
    log_request_activity(db, request, user.id, "login", "User logged in")
    logger.info("Login successful", extra={"user_id": user.id})
    return LoginResponse(user=AuthUser.model_validate(user))


@router.post("/me/logout", response_model=LogoutResponse)
def logout(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LogoutResponse:
    """Clear the session cookie; records the logout when a user was logged in."""
    try:
        user = resolve_current_user(db, get_session_token(request))
    except Exception as e:
        logger.exception("Logout error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e

    response.delete_cookie(key=get_settings().SESSION_COOKIE_NAME, path="/")
    response.headers["X-Redirect-Location"] = LOGIN_REDIRECT
    if user is not None:
        log_request_activity(db, request, user.id, "logout", "User logged out")
        logger.info("Logout successful", extra={"user_id": user.id})
    return LogoutResponse(success=True, redirect_url=LOGIN_REDIRECT)


@router.get("/me", response_model=AuthUser)
def get_me(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthUser:
    """Return the current user's id, name, email, role and image. 401 when not logged in."""
    try:
        user = resolve_current_user(db, get_session_token(request))
    except Exception as e:
        logger.exception("Error fetching current user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user data",
        ) from e
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


@router.get("/session", response_model=SessionResponse)
def get_session(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> SessionResponse:
    """
    Session probe for polling clients: always 200, with user null when not logged in.
    Only an unexpected failure produces an error status.
    """
    try:
        user = resolve_current_user(db, get_session_token(request))
    except Exception as e:
        logger.exception("Session API error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve session",
        ) from e
    return SessionResponse(user=user)
