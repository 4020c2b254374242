"""Admin audit log of user logins and logouts."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from volterra.api.v1.deps import require_admin
from volterra.core.database import get_db
from volterra.models import UserActivity
from volterra.schemas.auth import AuthUser, UserActivityItem, UserActivityListResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserActivityListResponse)
def list_user_activity(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AuthUser, Depends(require_admin)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> UserActivityListResponse:
    """Most recent activity first, with the acting user's name and email (admin only)."""
    try:
        rows = (
            db.query(UserActivity)
            .options(joinedload(UserActivity.user))
            .order_by(UserActivity.created_at.desc(), UserActivity.id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching user activity")
        raise HTTPException(status_code=500, detail="Failed to fetch user activity") from e
    return UserActivityListResponse(activities=[UserActivityItem.model_validate(r) for r in rows])
