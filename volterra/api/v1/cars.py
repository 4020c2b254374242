"""Car endpoints: newest-first listing with brand and cover image, detail, and CRUD."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from volterra.api.v1.deps import get_current_user, id_or_404, require_admin
from volterra.core.database import get_db
from volterra.models import Brand, Car, CarImage, CarStatus, Feature
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DeleteResponse
from volterra.schemas.inventory import (
    CarCreate,
    CarDetail,
    CarImageOut,
    CarListItem,
    CarUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Car not found")


def _load_detail(db: Session, pk: int) -> Car | None:
    return (
        db.query(Car)
        .options(
            joinedload(Car.brand),
            selectinload(Car.images),
            selectinload(Car.features),
        )
        .filter(Car.id == pk)
        .first()
    )


def _resolve_brand(db: Session, brand_id: int) -> Brand:
    brand = db.get(Brand, brand_id)
    if brand is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Brand {brand_id} does not exist",
        )
    return brand


def _resolve_features(db: Session, feature_ids: list[int]) -> list[Feature]:
    """Load features by id; 400 naming the first id that does not exist."""
    wanted = list(dict.fromkeys(feature_ids))
    if not wanted:
        return []
    found = {f.id: f for f in db.query(Feature).filter(Feature.id.in_(wanted)).all()}
    missing = [fid for fid in wanted if fid not in found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Feature {missing[0]} does not exist",
        )
    return [found[fid] for fid in wanted]


@router.get("", response_model=list[CarListItem])
def list_cars(
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=255)] = None,
    brand_id: int | None = None,
    car_status: Annotated[CarStatus | None, Query(alias="status")] = None,
) -> list[CarListItem]:
    """
    Cars newest first, each joined with its brand and first image.

    Optional filters: search (name or model, case-insensitive), brand_id, status.
    """
    query = db.query(Car).options(joinedload(Car.brand), selectinload(Car.images))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Car.name.ilike(pattern), Car.model.ilike(pattern)))
    if brand_id is not None:
        query = query.filter(Car.brand_id == brand_id)
    if car_status is not None:
        query = query.filter(Car.status == car_status.value)
    try:
        cars = query.order_by(Car.created_at.desc(), Car.id.desc()).all()
    except SQLAlchemyError as e:
        logger.exception("Error fetching cars")
        raise HTTPException(status_code=500, detail="Failed to fetch cars") from e
    return [
        CarListItem.model_validate(car).model_copy(
            update={
                "first_image": CarImageOut.model_validate(car.images[0]) if car.images else None
            }
        )
        for car in cars
    ]


@router.get("/{car_id}", response_model=CarDetail)
def get_car(
    car_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> CarDetail:
    pk = id_or_404(car_id, "Car")
    try:
        car = _load_detail(db, pk)
    except SQLAlchemyError as e:
        logger.exception("Error fetching car %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch car") from e
    if car is None:
        raise _not_found()
    return CarDetail.model_validate(car)


@router.post("", response_model=CarDetail, status_code=status.HTTP_201_CREATED)
def create_car(
    body: CarCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> CarDetail:
    """Create a car with its images and features. Unknown brand or feature ids are 400."""
    data = body.model_dump(exclude={"image_urls", "feature_ids"})
    data["status"] = body.status.value
    try:
        _resolve_brand(db, body.brand_id)
        features = _resolve_features(db, body.feature_ids)
        car = Car(**data)
        car.features = features
        car.images = [CarImage(url=url) for url in body.image_urls]
        db.add(car)
        db.commit()
        created = _load_detail(db, car.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating car")
        raise HTTPException(status_code=500, detail="Failed to create car") from e
    logger.info("Car created", extra={"car_id": created.id, "brand_id": created.brand_id})
    return CarDetail.model_validate(created)


@router.put("/{car_id}", response_model=CarDetail)
def update_car(
    car_id: str,
    body: CarUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> CarDetail:
    """Partial update; image_urls and feature_ids replace the current sets when given."""
    pk = id_or_404(car_id, "Car")
    changes = body.model_dump(exclude_unset=True)
    image_urls = changes.pop("image_urls", None)
    feature_ids = changes.pop("feature_ids", None)
    try:
        car = _load_detail(db, pk)
        if car is None:
            raise _not_found()
        if changes.get("brand_id") is not None:
            _resolve_brand(db, changes["brand_id"])
        for field, value in changes.items():
            if value is None and field in ("name", "model", "brand_id", "status"):
                continue
            if isinstance(value, CarStatus):
                value = value.value
            setattr(car, field, value)
        if feature_ids is not None:
            car.features = _resolve_features(db, feature_ids)
        if image_urls is not None:
            car.images = [CarImage(url=url) for url in image_urls]
        db.commit()
        db.expire_all()
        updated = _load_detail(db, pk)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating car %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update car") from e
    return CarDetail.model_validate(updated)


@router.delete("/{car_id}", response_model=DeleteResponse)
def delete_car(
    car_id: str,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AuthUser, Depends(require_admin)],
) -> DeleteResponse:
    """Delete a car with its images (admin only)."""
    pk = id_or_404(car_id, "Car")
    try:
        car = db.get(Car, pk)
        if car is None:
            raise _not_found()
        db.delete(car)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting car %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete car") from e
    logger.info("Car deleted", extra={"car_id": pk})
    return DeleteResponse()
