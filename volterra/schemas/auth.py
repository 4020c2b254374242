"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from volterra.models.enums import UserRole


class LoginRequest(BaseModel):
    """Credentials for login. Blank values are rejected by the endpoint with 400."""

    email: str = Field(default="", max_length=255, description="Account email")
    password: str = Field(default="", max_length=128, description="Password")


class AuthUser(BaseModel):
    """
    Projection of the authenticated user exposed to clients.

    Exactly id, name, email, role and image; never the password hash or status.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str
    role: UserRole
    image: str | None = None


class SessionResponse(BaseModel):
    """Session probe payload; user is null when not logged in."""

    user: AuthUser | None = None


class LoginResponse(BaseModel):
    user: AuthUser


class LogoutResponse(BaseModel):
    success: bool = True
    redirect_url: str = "/auth/login"


class UserActivityUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str | None = None
    email: str


class UserActivityItem(BaseModel):
    """Audit entry for the admin activity log."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    action: str
    details: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
    user: UserActivityUser


class UserActivityListResponse(BaseModel):
    activities: list[UserActivityItem]
