"""Workshop service catalogue: listing with booking counts and CRUD."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volterra.api.v1.deps import get_current_user, id_or_404, require_admin
from volterra.core.database import get_db
from volterra.models import Service, ServiceBooking
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DeleteResponse
from volterra.schemas.customer import ServiceCreate, ServiceOut, ServiceUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")


def _with_counts(db: Session):
    return (
        db.query(Service, func.count(ServiceBooking.id))
        .outerjoin(ServiceBooking, ServiceBooking.service_id == Service.id)
        .group_by(Service.id)
    )


def _to_out(service: Service, booking_count: int) -> ServiceOut:
    return ServiceOut.model_validate(service).model_copy(update={"booking_count": booking_count})


@router.get("", response_model=list[ServiceOut])
def list_services(db: Annotated[Session, Depends(get_db)]) -> list[ServiceOut]:
    """Services newest first with their booking counts."""
    try:
        rows = _with_counts(db).order_by(Service.created_at.desc(), Service.id.desc()).all()
    except SQLAlchemyError as e:
        logger.exception("Error fetching services")
        raise HTTPException(status_code=500, detail="Failed to fetch services") from e
    return [_to_out(service, count) for service, count in rows]


@router.get("/{service_id}", response_model=ServiceOut)
def get_service(
    service_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceOut:
    pk = id_or_404(service_id, "Service")
    try:
        row = _with_counts(db).filter(Service.id == pk).first()
    except SQLAlchemyError as e:
        logger.exception("Error fetching service %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch service") from e
    if row is None:
        raise _not_found()
    return _to_out(*row)


@router.post("", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
def create_service(
    body: ServiceCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> ServiceOut:
    try:
        service = Service(**body.model_dump())
        db.add(service)
        db.commit()
        db.refresh(service)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating service")
        raise HTTPException(status_code=500, detail="Failed to create service") from e
    logger.info("Service created", extra={"service_id": service.id})
    return _to_out(service, 0)


@router.put("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: str,
    body: ServiceUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> ServiceOut:
    """Partial update; an explicit null name is ignored."""
    pk = id_or_404(service_id, "Service")
    changes = body.model_dump(exclude_unset=True)
    try:
        service = db.get(Service, pk)
        if service is None:
            raise _not_found()
        for field, value in changes.items():
            if field == "name" and value is None:
                continue
            setattr(service, field, value)
        db.commit()
        row = _with_counts(db).filter(Service.id == pk).one()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating service %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update service") from e
    return _to_out(*row)


@router.delete("/{service_id}", response_model=DeleteResponse)
def delete_service(
    service_id: str,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AuthUser, Depends(require_admin)],
) -> DeleteResponse:
    """Delete a service (admin only). Refused while bookings still reference it."""
    pk = id_or_404(service_id, "Service")
    try:
        service = db.get(Service, pk)
        if service is None:
            raise _not_found()
        booking_count = (
            db.query(func.count(ServiceBooking.id)).filter(ServiceBooking.service_id == pk).scalar()
        )
        if booking_count:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete service with associated bookings. Remove the bookings first.",
            )
        db.delete(service)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting service %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete service") from e
    logger.info("Service deleted", extra={"service_id": pk})
    return DeleteResponse()
