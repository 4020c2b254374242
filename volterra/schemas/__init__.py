"""Pydantic request/response schemas."""

from volterra.schemas.auth import AuthUser, LoginRequest, SessionResponse
from volterra.schemas.common import DeleteResponse, PageMeta
from volterra.schemas.customer import (
    MemberDetail,
    MemberOut,
    SellListingDetail,
    SellListingOut,
    ServiceBookingOut,
    ServiceOut,
    TicketDetail,
    TicketOut,
)
from volterra.schemas.dashboard import DashboardResponse
from volterra.schemas.health import HealthResponse
from volterra.schemas.inventory import (
    BrandDetail,
    BrandListItem,
    CarDetail,
    CarListItem,
    FeatureOut,
)

__all__ = [
    "AuthUser",
    "BrandDetail",
    "BrandListItem",
    "CarDetail",
    "CarListItem",
    "DashboardResponse",
    "DeleteResponse",
    "FeatureOut",
    "HealthResponse",
    "LoginRequest",
    "MemberDetail",
    "MemberOut",
    "PageMeta",
    "SellListingDetail",
    "SellListingOut",
    "ServiceBookingOut",
    "ServiceOut",
    "SessionResponse",
    "TicketDetail",
    "TicketOut",
]
