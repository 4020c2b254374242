"""Dashboard summary: headline counts and a short recent-activity feed."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volterra.api.v1.deps import get_current_user
from volterra.core.database import get_db
from volterra.models import Brand, Car, ListingStatus, Member, SellListing, Ticket
from volterra.schemas.auth import AuthUser
from volterra.schemas.dashboard import ActivityEntry, DashboardCounts, DashboardResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Rows taken from each source before merging, and entries kept after.
PER_SOURCE_LIMIT = 3
FEED_LIMIT = 5


def _recent(db: Session, model):
    return (
        db.query(model)
        .order_by(model.created_at.desc(), model.id.desc())
        .limit(PER_SOURCE_LIMIT)
        .all()
    )


def recent_activity(db: Session) -> list[ActivityEntry]:
    """Newest cars, listings, tickets and members merged by date, newest first."""
    entries = [
        ActivityEntry(id=c.id, type="Car Added", name=c.name, status=c.status, date=c.created_at)
        for c in _recent(db, Car)
    ]
    entries += [
        ActivityEntry(
            id=s.id, type="Listing", name=s.car_name, status=s.status, date=s.created_at
        )
        for s in _recent(db, SellListing)
    ]
    entries += [
        ActivityEntry(
            id=t.id, type="Ticket", name=t.ticket_number, status=t.status, date=t.created_at
        )
        for t in _recent(db, Ticket)
    ]
    entries += [
        ActivityEntry(id=m.id, type="Member Joined", name=m.name, status="NEW", date=m.created_at)
        for m in _recent(db, Member)
    ]
    entries.sort(key=lambda e: (e.date, e.type, e.id), reverse=True)
    return entries[:FEED_LIMIT]


@router.get("/stats", response_model=DashboardResponse)
def get_dashboard_stats(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[AuthUser, Depends(get_current_user)],
) -> DashboardResponse:
    try:
        counts = DashboardCounts(
            cars_count=db.query(func.count(Car.id)).scalar(),
            brands_count=db.query(func.count(Brand.id)).scalar(),
            members_count=db.query(func.count(Member.id)).scalar(),
            pending_listings_count=db.query(func.count(SellListing.id))
            .filter(SellListing.status == ListingStatus.PENDING.value)
            .scalar(),
        )
        activity = recent_activity(db)
    except SQLAlchemyError as e:
        logger.exception("Error fetching dashboard stats")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard stats") from e
    return DashboardResponse(stats=counts, recent_activity=activity)
