"""Feature endpoints (e.g. sunroof, heated seats) with per-feature car counts."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from volterra.api.v1.deps import get_current_user, id_or_404
from volterra.core.database import get_db
from volterra.models import Feature, car_features
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DeleteResponse
from volterra.schemas.inventory import FeatureOut, FeatureWrite

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feature not found")


def _duplicate_name() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Feature with this name already exists",
    )


def _with_counts(db: Session):
    return (
        db.query(Feature, func.count(car_features.c.car_id))
        .outerjoin(car_features, car_features.c.feature_id == Feature.id)
        .group_by(Feature.id)
    )


def _to_out(feature: Feature, cars_count: int) -> FeatureOut:
    return FeatureOut.model_validate(feature).model_copy(update={"cars_count": cars_count})


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Feature.id).filter(func.lower(Feature.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Feature.id != exclude_id)
    return query.first() is not None


@router.get("", response_model=list[FeatureOut])
def list_features(db: Annotated[Session, Depends(get_db)]) -> list[FeatureOut]:
    """All features alphabetically, with the number of cars offering each."""
    try:
        rows = _with_counts(db).order_by(Feature.name.asc(), Feature.id.asc()).all()
    except SQLAlchemyError as e:
        logger.exception("Error fetching features")
        raise HTTPException(status_code=500, detail="Failed to fetch features") from e
    return [_to_out(feature, count) for feature, count in rows]


@router.get("/{feature_id}", response_model=FeatureOut)
def get_feature(
    feature_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> FeatureOut:
    pk = id_or_404(feature_id, "Feature")
    try:
        row = _with_counts(db).filter(Feature.id == pk).first()
    except SQLAlchemyError as e:
        logger.exception("Error fetching feature %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch feature") from e
    if row is None:
        raise _not_found()
    return _to_out(*row)


@router.post("", response_model=FeatureOut, status_code=status.HTTP_201_CREATED)
def create_feature(
    body: FeatureWrite,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> FeatureOut:
    try:
        if _name_taken(db, body.name):
            raise _duplicate_name()
        feature = Feature(name=body.name)
        db.add(feature)
        db.commit()
        db.refresh(feature)
    except IntegrityError as e:
        db.rollback()
        raise _duplicate_name() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating feature")
        raise HTTPException(status_code=500, detail="Failed to create feature") from e
    return _to_out(feature, 0)


@router.put("/{feature_id}", response_model=FeatureOut)
def update_feature(
    feature_id: str,
    body: FeatureWrite,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> FeatureOut:
    pk = id_or_404(feature_id, "Feature")
    try:
        feature = db.get(Feature, pk)
        if feature is None:
            raise _not_found()
        if _name_taken(db, body.name, exclude_id=pk):
            raise _duplicate_name()
        feature.name = body.name
        db.commit()
        row = _with_counts(db).filter(Feature.id == pk).one()
    except IntegrityError as e:
        db.rollback()
        raise _duplicate_name() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating feature %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update feature") from e
    return _to_out(*row)


@router.delete("/{feature_id}", response_model=DeleteResponse)
def delete_feature(
    feature_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> DeleteResponse:
    pk = id_or_404(feature_id, "Feature")
    try:
        feature = db.get(Feature, pk)
        if feature is None:
            raise _not_found()
        db.delete(feature)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting feature %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete feature") from e
    return DeleteResponse()
