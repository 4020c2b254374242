"""ORM models for admin users and their audit trail."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from volterra.models.base import Base, created_at_column, updated_at_column
from volterra.models.enums import UserRole, UserStatus


class User(Base):
    """
    Admin account for cookie-session authentication and role-based access control.

    role: SUPER_ADMIN, ADMIN or USER. status: ACTIVE, PENDING or INACTIVE;
    only ACTIVE users may log in.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=UserRole.USER.value)
    status = Column(String(32), nullable=False, default=UserStatus.ACTIVE.value)
    image = Column(String(2048), nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    activities = relationship(
        "UserActivity", back_populates="user", cascade="all, delete-orphan"
    )


class UserActivity(Base):
    """One audited action (login, logout) by a user."""

    __tablename__ = "user_activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action = Column(String(64), nullable=False)
    details = Column(String(500), nullable=True)
    ip_address = Column(String(100), nullable=True)
    user_agent = Column(String(255), nullable=True)
    created_at = created_at_column()

    user = relationship("User", back_populates="activities")
