"""Member endpoints: paginated listing, detail with sell listings, activation, deletion."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from volterra.api.v1.deps import get_current_user, id_or_404, require_admin
from volterra.core.database import get_db
from volterra.models import Member, SellListing
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, DeleteResponse, PageMeta
from volterra.schemas.customer import MemberDetail, MemberListResponse, MemberOut, MemberUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")


@router.get("", response_model=MemberListResponse)
def list_members(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
    is_active: bool | None = None,
    search: Annotated[str | None, Query(max_length=255)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> MemberListResponse:
    """Members newest first, filtered by active flag and name/email/phone search."""
    query = db.query(Member)
    if is_active is not None:
        query = query.filter(Member.is_active.is_(is_active))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Member.name.ilike(pattern),
                Member.email.ilike(pattern),
                Member.phone_number.like(pattern),
            )
        )
    try:
        total = query.count()
        members = (
            query.order_by(Member.created_at.desc(), Member.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching members")
        raise HTTPException(status_code=500, detail="Failed to fetch members") from e
    return MemberListResponse(
        members=[MemberOut.model_validate(m) for m in members],
        meta=PageMeta.build(total=total, page=page, limit=limit),
    )


@router.get("/{member_id}", response_model=MemberDetail)
def get_member(
    member_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> MemberDetail:
    pk = id_or_404(member_id, "Member")
    try:
        member = (
            db.query(Member)
            .options(selectinload(Member.sell_listings))
            .filter(Member.id == pk)
            .first()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching member %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch member") from e
    if member is None:
        raise _not_found()
    return MemberDetail.model_validate(member)


@router.put("/{member_id}", response_model=MemberOut)
def update_member(
    member_id: str,
    body: MemberUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> MemberOut:
    """Activate or deactivate a member; an omitted is_active leaves it unchanged."""
    pk = id_or_404(member_id, "Member")
    try:
        member = db.get(Member, pk)
        if member is None:
            raise _not_found()
        if body.is_active is not None:
            member.is_active = body.is_active
        db.commit()
        db.refresh(member)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating member %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update member") from e
    return MemberOut.model_validate(member)


@router.delete("/{member_id}", response_model=DeleteResponse)
def delete_member(
    member_id: str,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AuthUser, Depends(require_admin)],
) -> DeleteResponse:
    """Delete a member (admin only). Refused while the member has sell listings."""
    pk = id_or_404(member_id, "Member")
    try:
        member = db.get(Member, pk)
        if member is None:
            raise _not_found()
        listing_count = (
            db.query(func.count(SellListing.id)).filter(SellListing.member_id == pk).scalar()
        )
        if listing_count:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete member with associated listings. Remove the listings first.",
            )
        db.delete(member)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting member %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete member") from e
    return DeleteResponse()
