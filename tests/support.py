"""Shared test wiring: in-memory SQLite database, TestClient and record builders."""

import unittest
from datetime import datetime
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from volterra.core.config import get_settings
from volterra.api.v1.deps import get_optional_user
from volterra.core.database import enable_sqlite_foreign_keys, get_db
from volterra.core.security import create_session_token, hash_password
from volterra.main import app
from volterra.schemas.auth import AuthUser
from volterra.models import (
    Base,
    Brand,
    Car,
    CarImage,
    Member,
    SellListing,
    Service,
    Ticket,
    TicketResponse,
    User,
    UserRole,
    UserStatus,
)

TEST_PASSWORD = "correct-horse-battery"


def make_engine():
    """One shared in-memory connection so every session sees the same data."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test with a session for arranging data."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def add(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def make_user(
        self,
        email: str = "admin@volterra.example",
        role: UserRole = UserRole.ADMIN,
        status: UserStatus = UserStatus.ACTIVE,
        name: str | None = "Ada Admin",
        image: str | None = None,
    ) -> User:
        return self.add(
            User(
                email=email,
                name=name,
                password_hash=hash_password(TEST_PASSWORD),
                role=role.value,
                status=status.value,
                image=image,
            )
        )

    def make_brand(self, name: str, created_at: datetime | None = None) -> Brand:
        brand = Brand(name=name, logo_url=f"https://cdn.example/{name.lower()}.png")
        if created_at is not None:
            brand.created_at = created_at
            brand.updated_at = created_at
        return self.add(brand)

    def make_car(
        self,
        brand: Brand,
        name: str,
        created_at: datetime,
        image_urls: tuple[str, ...] = (),
        status: str = "NEW",
    ) -> Car:
        car = Car(
            name=name,
            model=f"{name} Model",
            brand_id=brand.id,
            price=45000.0,
            status=status,
            created_at=created_at,
            updated_at=created_at,
        )
        car.images = [CarImage(url=url, created_at=created_at) for url in image_urls]
        return self.add(car)

    def make_member(self, name: str, created_at: datetime, is_active: bool = True) -> Member:
        return self.add(
            Member(
                name=name,
                email=f"{name.lower().replace(' ', '.')}@mail.example",
                phone_number="+254700000000",
                is_active=is_active,
                created_at=created_at,
                updated_at=created_at,
            )
        )

    def make_listing(
        self,
        car_name: str,
        created_at: datetime,
        member: Member | None = None,
        status: str = "PENDING",
    ) -> SellListing:
        return self.add(
            SellListing(
                member_id=member.id if member else None,
                name=member.name if member else "Walk In",
                email=member.email if member else "walkin@mail.example",
                car_name=car_name,
                status=status,
                created_at=created_at,
                updated_at=created_at,
            )
        )

    def make_ticket(
        self, number: str, created_at: datetime, status: str = "OPEN", message: str = "Help"
    ) -> Ticket:
        return self.add(
            Ticket(
                ticket_number=number,
                name="Grace Customer",
                email="grace@mail.example",
                message=message,
                status=status,
                created_at=created_at,
                updated_at=created_at,
            )
        )

    def make_service(self, name: str, created_at: datetime) -> Service:
        return self.add(
            Service(name=name, price=120.0, duration="2h", created_at=created_at, updated_at=created_at)
        )

    def make_response(self, ticket: Ticket, message: str, created_at: datetime) -> TicketResponse:
        return self.add(
            TicketResponse(
                ticket_id=ticket.id, message=message, created_at=created_at, updated_at=created_at
            )
        )


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db yields sessions on the test database."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        super().tearDown()

    def auth_headers(self, user: User) -> dict[str, str]:
        """Cookie header carrying a valid session for user."""
        token = create_session_token(user_id=user.id, email=user.email, role=user.role)
        return {"Cookie": f"{get_settings().SESSION_COOKIE_NAME}={token}"}

    def break_database(self, error: Exception) -> MagicMock:
        """Route every get_db call to a session whose queries raise error."""
        broken = MagicMock(spec=Session)
        broken.query.side_effect = error
        broken.get.side_effect = error

        def override_get_db():
            yield broken

        app.dependency_overrides[get_db] = override_get_db
        return broken

    def act_as(self, role: UserRole = UserRole.ADMIN) -> AuthUser:
        """Resolve every request to a fixed user without touching the database."""
        user = AuthUser(id=999, name="Fixture Staff", email="fixture@volterra.example", role=role)
        app.dependency_overrides[get_optional_user] = lambda: user
        return user
