"""Pydantic schemas for members, sell listings, services, bookings and tickets."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from volterra.models.enums import BookingStatus, ListingStatus, TicketStatus
from volterra.schemas.common import PageMeta, require_name
from volterra.schemas.inventory import CarSummary


def _require_email(value: str) -> str:
    value = value.strip()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    return value


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone_number: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MemberUpdate(BaseModel):
    is_active: bool | None = None


class MemberListResponse(BaseModel):
    members: list[MemberOut]
    meta: PageMeta


class SellListingImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sell_listing_id: int
    url: str
    created_at: datetime


class SellListingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int | None = None
    car_id: int | None = None
    name: str
    email: str
    phone_number: str | None = None
    car_name: str
    brand_name: str | None = None
    mileage: int | None = None
    selling_price: float | None = None
    condition: str | None = None
    location: str | None = None
    description: str | None = None
    status: ListingStatus
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class SellListingDetail(SellListingOut):
    """Listing joined with its car, member and images."""

    car: CarSummary | None = None
    member: MemberOut | None = None
    images: list[SellListingImageOut] = Field(default_factory=list)


class MemberDetail(MemberOut):
    sell_listings: list[SellListingOut] = Field(default_factory=list)


class SellListingStatusUpdate(BaseModel):
    status: ListingStatus
    rejection_reason: str | None = None


class SellListingImagesResponse(BaseModel):
    success: bool = True
    image_count: int
    images: list[SellListingImageOut]


class ServiceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ServiceOut(ServiceSummary):
    description: str | None = None
    price: float | None = None
    duration: str | None = None
    logo_url: str | None = None
    booking_count: int = 0
    created_at: datetime
    updated_at: datetime


class ServiceCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration: str | None = Field(default=None, max_length=64)
    logo_url: str | None = Field(default=None, max_length=2048)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_name(v)


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration: str | None = Field(default=None, max_length=64)
    logo_url: str | None = Field(default=None, max_length=2048)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else require_name(v)


class ServiceBookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_id: int
    name: str
    email: str
    phone_number: str
    car_details: str
    preferred_date: datetime
    alternate_date: datetime | None = None
    message: str | None = None
    status: BookingStatus
    created_at: datetime
    updated_at: datetime
    service: ServiceSummary


class ServiceBookingCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone_number: str = Field(..., min_length=1, max_length=64)
    service_id: int
    car_details: str = Field(..., min_length=1)
    preferred_date: datetime
    alternate_date: datetime | None = None
    message: str | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _require_email(v)


class ServiceBookingStatusUpdate(BaseModel):
    status: BookingStatus


class TicketOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ticket_number: str
    name: str
    email: str
    phone_number: str | None = None
    message: str
    status: TicketStatus
    created_at: datetime
    updated_at: datetime


class TicketResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ticket_id: int
    message: str
    created_at: datetime
    updated_at: datetime


class TicketDetail(TicketOut):
    """Ticket with its staff responses, newest first."""

    responses: list[TicketResponseOut] = Field(default_factory=list)


class TicketCreate(BaseModel):
    """Contact form submission; the ticket number is assigned by the server."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone_number: str | None = Field(default=None, max_length=64)
    message: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _require_email(v)


class TicketUpdate(BaseModel):
    """Status change; a non-blank response is stored as a staff reply."""

    status: TicketStatus
    response: str | None = None


class TicketResponseCreate(BaseModel):
    message: str = Field(..., max_length=5000)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message must be non-empty")
        return v


class TicketListResponse(BaseModel):
    tickets: list[TicketOut]
    meta: PageMeta
