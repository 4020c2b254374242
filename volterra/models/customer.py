"""ORM models for customer-facing records: members, sell listings, services, bookings, tickets."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from volterra.models.base import Base, created_at_column, updated_at_column
from volterra.models.enums import BookingStatus, ListingStatus, TicketStatus


class Member(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(64), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    sell_listings = relationship(
        "SellListing", back_populates="member", order_by="SellListing.id"
    )


class SellListing(Base):
    """
    A member's offer to sell a vehicle to the dealership.

    status moves PENDING -> APPROVED | REJECTED -> SOLD; a rejection carries a reason.
    """

    __tablename__ = "sell_listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=True, index=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(64), nullable=True)
    car_name = Column(String(255), nullable=False)
    brand_name = Column(String(255), nullable=True)
    mileage = Column(Integer, nullable=True)
    selling_price = Column(Float, nullable=True)
    condition = Column(String(64), nullable=True)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=ListingStatus.PENDING.value, index=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    member = relationship("Member", back_populates="sell_listings")
    car = relationship("Car")
    images = relationship(
        "SellListingImage",
        back_populates="sell_listing",
        order_by="SellListingImage.id",
        cascade="all, delete-orphan",
    )


class SellListingImage(Base):
    __tablename__ = "sell_listing_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sell_listing_id = Column(
        Integer, ForeignKey("sell_listings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url = Column(String(2048), nullable=False)
    created_at = created_at_column()

    sell_listing = relationship("SellListing", back_populates="images")


class Service(Base):
    """A workshop service customers can book (e.g. oil change)."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=True)
    duration = Column(String(64), nullable=True)
    logo_url = Column(String(2048), nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    bookings = relationship("ServiceBooking", back_populates="service")


class ServiceBooking(Base):
    __tablename__ = "service_bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(64), nullable=False)
    car_details = Column(Text, nullable=False)
    preferred_date = Column(DateTime(timezone=True), nullable=False)
    alternate_date = Column(DateTime(timezone=True), nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=BookingStatus.PENDING.value, index=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    service = relationship("Service", back_populates="bookings")


class Ticket(Base):
    """Support ticket raised from the public site."""

    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_number = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(64), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=TicketStatus.OPEN.value, index=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    responses = relationship(
        "TicketResponse",
        back_populates="ticket",
        order_by="[TicketResponse.created_at.desc(), TicketResponse.id.desc()]",
        cascade="all, delete-orphan",
    )


class TicketResponse(Base):
    """A staff reply recorded on a ticket."""

    __tablename__ = "ticket_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(
        Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message = Column(Text, nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    ticket = relationship("Ticket", back_populates="responses")
