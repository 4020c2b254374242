"""Declarative base and the timestamp columns every dealership table carries."""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def created_at_column() -> Column:
    """Set by the database on insert; callers may override it (imports, fixtures)."""
    return Column(DateTime(timezone=True), nullable=False, server_default=func.now())


def updated_at_column() -> Column:
    """Like created_at, and refreshed on every ORM update."""
    return Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
