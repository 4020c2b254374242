"""Support ticket endpoints: public submission, staff review, replies and deletion."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from volterra.api.v1.deps import get_current_user, id_or_404
from volterra.core.database import get_db
from volterra.models import Ticket, TicketResponse, TicketStatus
from volterra.schemas.auth import AuthUser
from volterra.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, DeleteResponse, PageMeta
from volterra.schemas.customer import (
    TicketCreate,
    TicketDetail,
    TicketListResponse,
    TicketOut,
    TicketResponseCreate,
    TicketResponseOut,
    TicketUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

TICKET_NUMBER_PREFIX = "TKT-"
# First number handed out; numbers are zero-padded to at least four digits.
TICKET_NUMBER_START = 1001


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")


def _load_detail(db: Session, pk: int) -> Ticket | None:
    return (
        db.query(Ticket)
        .options(selectinload(Ticket.responses))
        .filter(Ticket.id == pk)
        .first()
    )


def next_ticket_number(db: Session) -> str:
    """TKT-#### from the ticket count, skipping numbers already taken."""
    candidate = db.query(func.count(Ticket.id)).scalar() + TICKET_NUMBER_START
    while True:
        number = f"{TICKET_NUMBER_PREFIX}{candidate:04d}"
        if db.query(Ticket.id).filter(Ticket.ticket_number == number).first() is None:
            return number
        candidate += 1


def _add_response(db: Session, ticket: Ticket, message: str) -> TicketResponse:
    reply = TicketResponse(ticket_id=ticket.id, message=message)
    db.add(reply)
    ticket.updated_at = func.now()
    return reply


@router.get("", response_model=TicketListResponse)
def list_tickets(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
    ticket_status: Annotated[TicketStatus | None, Query(alias="status")] = None,
    search: Annotated[str | None, Query(max_length=255)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> TicketListResponse:
    """Tickets newest first; search matches name, email, ticket number or message."""
    query = db.query(Ticket)
    if ticket_status is not None:
        query = query.filter(Ticket.status == ticket_status.value)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Ticket.name.ilike(pattern),
                Ticket.email.ilike(pattern),
                Ticket.ticket_number.ilike(pattern),
                Ticket.message.ilike(pattern),
            )
        )
    try:
        total = query.count()
        tickets = (
            query.order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Error fetching tickets")
        raise HTTPException(status_code=500, detail="Failed to fetch tickets") from e
    return TicketListResponse(
        tickets=[TicketOut.model_validate(t) for t in tickets],
        meta=PageMeta.build(total=total, page=page, limit=limit),
    )


@router.post("", response_model=TicketOut, status_code=status.HTTP_201_CREATED)
def create_ticket(
    body: TicketCreate,
    db: Annotated[Session, Depends(get_db)],
) -> TicketOut:
    """Open a ticket from the public contact form. New tickets start as OPEN."""
    try:
        ticket = Ticket(
            **body.model_dump(),
            ticket_number=next_ticket_number(db),
            status=TicketStatus.OPEN.value,
        )
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
    except IntegrityError as e:
        db.rollback()
        logger.warning("Ticket number collision while creating ticket")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ticket number already in use, retry",
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error creating ticket")
        raise HTTPException(status_code=500, detail="Failed to create ticket") from e
    logger.info("Ticket created", extra={"ticket_id": ticket.id, "ticket_number": ticket.ticket_number})
    return TicketOut.model_validate(ticket)


@router.get("/{ticket_id}", response_model=TicketDetail)
def get_ticket(
    ticket_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> TicketDetail:
    pk = id_or_404(ticket_id, "Ticket")
    try:
        ticket = _load_detail(db, pk)
    except SQLAlchemyError as e:
        logger.exception("Error fetching ticket %s", pk)
        raise HTTPException(status_code=500, detail="Failed to fetch ticket") from e
    if ticket is None:
        raise _not_found()
    return TicketDetail.model_validate(ticket)


@router.put("/{ticket_id}", response_model=TicketDetail)
def update_ticket(
    ticket_id: str,
    body: TicketUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[AuthUser, Depends(get_current_user)],
) -> TicketDetail:
    """Change the status; a non-blank response is also recorded as a reply."""
    pk = id_or_404(ticket_id, "Ticket")
    reply = (body.response or "").strip()
    try:
        ticket = db.get(Ticket, pk)
        if ticket is None:
            raise _not_found()
        ticket.status = body.status.value
        if reply:
            _add_response(db, ticket, reply)
        db.commit()
        db.expire_all()
        updated = _load_detail(db, pk)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating ticket %s", pk)
        raise HTTPException(status_code=500, detail="Failed to update ticket") from e
    logger.info(
        "Ticket status changed",
        extra={"ticket_id": pk, "ticket_status": updated.status, "user_id": user.id},
    )
    return TicketDetail.model_validate(updated)


@router.post(
    "/{ticket_id}/responses",
    response_model=TicketResponseOut,
    status_code=status.HTTP_201_CREATED,
)
def add_ticket_response(
    ticket_id: str,
    body: TicketResponseCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[AuthUser, Depends(get_current_user)],
) -> TicketResponseOut:
    """Record a reply without changing the ticket status."""
    pk = id_or_404(ticket_id, "Ticket")
    try:
        ticket = db.get(Ticket, pk)
        if ticket is None:
            raise _not_found()
        reply = _add_response(db, ticket, body.message)
        db.commit()
        db.refresh(reply)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error adding response to ticket %s", pk)
        raise HTTPException(status_code=500, detail="Failed to add response") from e
    logger.info("Ticket response added", extra={"ticket_id": pk, "user_id": user.id})
    return TicketResponseOut.model_validate(reply)


@router.delete("/{ticket_id}", response_model=DeleteResponse)
def delete_ticket(
    ticket_id: str,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> DeleteResponse:
    """Delete a ticket together with its responses."""
    pk = id_or_404(ticket_id, "Ticket")
    try:
        ticket = db.get(Ticket, pk)
        if ticket is None:
            raise _not_found()
        db.delete(ticket)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting ticket %s", pk)
        raise HTTPException(status_code=500, detail="Failed to delete ticket") from e
    return DeleteResponse()
