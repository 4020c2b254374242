"""Service booking endpoints: customers' workshop appointments and their status."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from volterra.api.v1.deps import get_current_user, id_or_404
from volterra.core.database import get_db
from volterra.models import BookingStatus, Service, ServiceBooking
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DeleteResponse
from volterra.schemas.customer import (
    ServiceBookingCreate,
    ServiceBookingOut,
    ServiceBookingStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")


def _load(db: Session, pk: int) -> ServiceBooking | None:
    return (
        db.query(ServiceBooking)
        .options(joinedload(ServiceBooking.service))
        .filter(ServiceBooking.id == pk)
        .first()
    )


@router.get("", response_model=list[ServiceBookingOut])
def list_service_bookings(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> list[ServiceBookingOut]:
    """Bookings newest first with a summary of the booked service."""
    try:
        bookings = (
            db.query(ServiceBooking)
            .options(joinedload(ServiceBooking.service))
            .order_by(ServiceBooking.created_at.desc(), ServiceBooking.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching service bookings")
        raise HTTPException(status_code=500, detail="Failed to fetch service bookings") from e
    return [ServiceBookingOut.model_validate(b) for b in bookings]


@router.get("/{booking_id}", response_model=ServiceBookingOut)
def get_service_booking(
    booking_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> ServiceBookingOut:
    pk = id_or_404(booking_id, "Booking")
    try:
        booking = _load(db, pk)
    except SQLAlchemyError as e:
        logger.exception("Error fetching service booking %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch service booking") from e
    if booking is None:
        raise _not_found()
    return ServiceBookingOut.model_validate(booking)


@router.post("", response_model=ServiceBookingOut, status_code=status.HTTP_201_CREATED)
def create_service_booking(
    body: ServiceBookingCreate,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceBookingOut:
    """
    Book a service. Open to anonymous callers (the public booking form);
    new bookings always start as PENDING.
    """
    try:
        if db.get(Service, body.service_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Service not found",
            )
        booking = ServiceBooking(**body.model_dump(), status=BookingStatus.PENDING.value)
        db.add(booking)
        db.commit()
        created = _load(db, booking.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating service booking")
        raise HTTPException(status_code=500, detail="Failed to create service booking") from e
    logger.info(
        "Service booking created",
        extra={"booking_id": created.id, "service_id": created.service_id},
    )
    return ServiceBookingOut.model_validate(created)


@router.patch("/{booking_id}", response_model=ServiceBookingOut)
def update_service_booking_status(
    booking_id: str,
    body: ServiceBookingStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> ServiceBookingOut:
    pk = id_or_404(booking_id, "Booking")
    try:
        booking = _load(db, pk)
        if booking is None:
            raise _not_found()
        booking.status = body.status.value
        db.commit()
        db.refresh(booking)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating service booking %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update service booking") from e
    return ServiceBookingOut.model_validate(booking)


@router.delete("/{booking_id}", response_model=DeleteResponse)
def delete_service_booking(
    booking_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> DeleteResponse:
    pk = id_or_404(booking_id, "Booking")
    try:
        booking = db.get(ServiceBooking, pk)
        if booking is None:
            raise _not_found()
        db.delete(booking)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting service booking %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete service booking") from e
    return DeleteResponse()
