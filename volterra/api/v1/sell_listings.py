"""Sell listing endpoints: review queue of vehicles members offer to the dealership."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from volterra.api.v1.deps import get_current_user, id_or_404
from volterra.core.database import get_db
from volterra.models import ListingStatus, SellListing, SellListingImage
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DeleteResponse
from volterra.schemas.customer import (
    SellListingDetail,
    SellListingImageOut,
    SellListingImagesResponse,
    SellListingOut,
    SellListingStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Query value meaning "no status filter".
ALL_STATUSES = "all"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")


@router.get("", response_model=list[SellListingOut])
def list_sell_listings(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
    listing_status: Annotated[str | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> list[SellListingOut]:
    """Listings newest first; status=all or omitted means every status."""
    query = db.query(SellListing)
    if listing_status and listing_status != ALL_STATUSES:
        try:
            query = query.filter(SellListing.status == ListingStatus(listing_status).value)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid status",
            ) from e
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                SellListing.name.ilike(pattern),
                SellListing.email.ilike(pattern),
                SellListing.car_name.ilike(pattern),
            )
        )
    try:
        listings = query.order_by(SellListing.created_at.desc(), SellListing.id.desc()).all()
    except SQLAlchemyError as e:
        logger.exception("Error fetching sell listings")
        raise HTTPException(status_code=500, detail="Failed to fetch listings") from e
    return [SellListingOut.model_validate(listing) for listing in listings]


@router.get("/{listing_id}", response_model=SellListingDetail)
def get_sell_listing(
    listing_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> SellListingDetail:
    pk = id_or_404(listing_id, "Listing")
    try:
        listing = (
            db.query(SellListing)
            .options(
                selectinload(SellListing.car),
                selectinload(SellListing.member),
                selectinload(SellListing.images),
            )
            .filter(SellListing.id == pk)
            .first()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching sell listing %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch listing") from e
    if listing is None:
        raise _not_found()
    return SellListingDetail.model_validate(listing)


@router.patch("/{listing_id}", response_model=SellListingOut)
def update_sell_listing_status(
    listing_id: str,
    body: SellListingStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[AuthUser, Depends(get_current_user)],
) -> SellListingOut:
    """Move a listing to a new status. Rejecting requires a rejection_reason."""
    pk = id_or_404(listing_id, "Listing")
    reason = (body.rejection_reason or "").strip()
    if body.status == ListingStatus.REJECTED and not reason:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rejection reason is required",
        )
    try:
        listing = db.get(SellListing, pk)
        if listing is None:
            raise _not_found()
        listing.status = body.status.value
        if body.status == ListingStatus.REJECTED:
            listing.rejection_reason = reason
        db.commit()
        db.refresh(listing)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating sell listing %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update listing") from e
    logger.info(
        "Sell listing status changed",
        extra={"listing_id": pk, "listing_status": listing.status, "user_id": user.id},
    )
    return SellListingOut.model_validate(listing)


@router.delete("/{listing_id}", response_model=DeleteResponse)
def delete_sell_listing(
    listing_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> DeleteResponse:
    pk = id_or_404(listing_id, "Listing")
    try:
        listing = db.get(SellListing, pk)
        if listing is None:
            raise _not_found()
        db.delete(listing)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting sell listing %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete listing") from e
    return DeleteResponse()


@router.get("/{listing_id}/images", response_model=SellListingImagesResponse)
def list_sell_listing_images(
    listing_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> SellListingImagesResponse:
    """Images of one listing, oldest first."""
    pk = id_or_404(listing_id, "Listing")
    try:
        if db.get(SellListing, pk) is None:
            raise _not_found()
        images = (
            db.query(SellListingImage)
            .filter(SellListingImage.sell_listing_id == pk)
            .order_by(SellListingImage.created_at.asc(), SellListingImage.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching images for sell listing %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch images") from e
    return SellListingImagesResponse(
        success=True,
        image_count=len(images),
        images=[SellListingImageOut.model_validate(i) for i in images],
    )
