"""Schemas for the dashboard summary."""

from datetime import datetime

from pydantic import BaseModel


class DashboardCounts(BaseModel):
    cars_count: int
    brands_count: int
    members_count: int
    pending_listings_count: int


class ActivityEntry(BaseModel):
    """One row of the recent-activity feed (a car, listing, ticket or member)."""

    id: int
    type: str
    name: str
    status: str
    date: datetime


class DashboardResponse(BaseModel):
    stats: DashboardCounts
    recent_activity: list[ActivityEntry]
