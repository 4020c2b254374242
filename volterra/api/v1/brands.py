"""Brand endpoints: listing with car counts, detail with cars, and CRUD."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from volterra.api.v1.deps import get_current_user, id_or_404, require_admin
from volterra.core.database import get_db
from volterra.models import Brand, Car
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DeleteResponse
from volterra.schemas.inventory import (
    BrandCreate,
    BrandDetail,
    BrandListItem,
    BrandSummary,
    BrandUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Brand not found")


def _duplicate_name() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Brand with this name already exists",
    )


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Brand.id).filter(func.lower(Brand.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Brand.id != exclude_id)
    return query.first() is not None


@router.get("", response_model=list[BrandListItem])
def list_brands(db: Annotated[Session, Depends(get_db)]) -> list[BrandListItem]:
    """All brands, alphabetical by name, each with the number of cars it owns."""
    try:
        rows = (
            db.query(Brand, func.count(Car.id))
            .outerjoin(Car, Car.brand_id == Brand.id)
            .group_by(Brand.id)
            .order_by(Brand.name.asc(), Brand.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching brands")
        raise HTTPException(status_code=500, detail="Failed to fetch brands") from e
    return [
        BrandListItem.model_validate(brand).model_copy(update={"car_count": count})
        for brand, count in rows
    ]


@router.get("/{brand_id}", response_model=BrandDetail)
def get_brand(
    brand_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> BrandDetail:
    """Single brand with its cars. Unknown and non-numeric ids are both 404."""
    pk = id_or_404(brand_id, "Brand")
    try:
        brand = (
            db.query(Brand)
            .options(selectinload(Brand.cars))
            .filter(Brand.id == pk)
            .first()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching brand %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch brand") from e
    if brand is None:
        raise _not_found()
    return BrandDetail.model_validate(brand)


@router.post("", response_model=BrandSummary, status_code=status.HTTP_201_CREATED)
def create_brand(
    body: BrandCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> BrandSummary:
    try:
        if _name_taken(db, body.name):
            raise _duplicate_name()
        brand = Brand(**body.model_dump())
        db.add(brand)
        db.commit()
        db.refresh(brand)
    except IntegrityError as e:
        db.rollback()
        raise _duplicate_name() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating brand")
        raise HTTPException(status_code=500, detail="Failed to create brand") from e
    logger.info("Brand created", extra={"brand_id": brand.id})
    return BrandSummary.model_validate(brand)


@router.put("/{brand_id}", response_model=BrandSummary)
def update_brand(
    brand_id: str,
    body: BrandUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> BrandSummary:
    pk = id_or_404(brand_id, "Brand")
    changes = body.model_dump(exclude_unset=True)
    try:
        brand = db.get(Brand, pk)
        if brand is None:
            raise _not_found()
        if changes.get("name") and _name_taken(db, changes["name"], exclude_id=pk):
            raise _duplicate_name()
        for field, value in changes.items():
            if field == "name" and value is None:
                continue
            setattr(brand, field, value)
        db.commit()
        db.refresh(brand)
    except IntegrityError as e:
        db.rollback()
        raise _duplicate_name() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating brand %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update brand") from e
    return BrandSummary.model_validate(brand)


@router.delete("/{brand_id}", response_model=DeleteResponse)
def delete_brand(
    brand_id: str,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AuthUser, Depends(require_admin)],
) -> DeleteResponse:
    """Delete a brand (admin only). Refused while cars still reference it."""
    pk = id_or_404(brand_id, "Brand")
    try:
        brand = db.get(Brand, pk)
        if brand is None:
            raise _not_found()
        car_count = db.query(func.count(Car.id)).filter(Car.brand_id == pk).scalar()
        if car_count:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete brand with associated cars. Remove the cars first.",
            )
        db.delete(brand)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting brand %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete brand") from e
    logger.info("Brand deleted", extra={"brand_id": pk})
    return DeleteResponse()
