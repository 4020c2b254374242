"""SQLAlchemy ORM models."""

from volterra.models.base import Base
from volterra.models.customer import (
    Member,
    SellListing,
    SellListingImage,
    Service,
    ServiceBooking,
    Ticket,
    TicketResponse,
)
from volterra.models.enums import (
    BookingStatus,
    CarStatus,
    ListingStatus,
    TicketStatus,
    UserRole,
    UserStatus,
)
from volterra.models.inventory import Brand, Car, CarImage, Feature, car_features
from volterra.models.user import User, UserActivity

__all__ = [
    "Base",
    "BookingStatus",
    "Brand",
    "Car",
    "CarImage",
    "CarStatus",
    "Feature",
    "ListingStatus",
    "Member",
    "SellListing",
    "SellListingImage",
    "Service",
    "ServiceBooking",
    "Ticket",
    "TicketResponse",
    "TicketStatus",
    "User",
    "UserActivity",
    "UserRole",
    "UserStatus",
    "car_features",
]
