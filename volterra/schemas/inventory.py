"""Pydantic schemas for brands, cars, car images and features."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from volterra.models.enums import CarStatus
from volterra.schemas.common import require_name


class BrandSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    logo_url: str | None = None
    vehicle_image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class BrandListItem(BrandSummary):
    """Brand row for the listing, with the number of cars in stock."""

    car_count: int = 0


class CarImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    created_at: datetime


class FeatureSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CarSummary(BaseModel):
    """Car columns without relations."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    model: str
    brand_id: int
    price: float | None = None
    status: CarStatus
    year_of_manufacture: int | None = None
    mileage: int | None = None
    color: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class CarListItem(CarSummary):
    """Car row for the listing: joined brand and the first image only."""

    brand: BrandSummary
    first_image: CarImageOut | None = None


class CarDetail(CarSummary):
    brand: BrandSummary
    images: list[CarImageOut] = Field(default_factory=list)
    features: list[FeatureSummary] = Field(default_factory=list)


class BrandDetail(BrandSummary):
    """Single brand with every car it owns."""

    cars: list[CarSummary] = Field(default_factory=list)


class BrandCreate(BaseModel):
    name: str = Field(..., max_length=255)
    logo_url: str | None = Field(default=None, max_length=2048)
    vehicle_image_url: str | None = Field(default=None, max_length=2048)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_name(v)


class BrandUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=2048)
    vehicle_image_url: str | None = Field(default=None, max_length=2048)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else require_name(v)


class CarCreate(BaseModel):
    """Create payload. image_urls are stored in the given order; the first is the cover image."""

    name: str = Field(..., max_length=255)
    model: str = Field(default="", max_length=255)
    brand_id: int
    price: float | None = Field(default=None, ge=0)
    status: CarStatus = CarStatus.NEW
    year_of_manufacture: int | None = Field(default=None, ge=1886, le=2100)
    mileage: int | None = Field(default=None, ge=0)
    color: str | None = Field(default=None, max_length=64)
    fuel_type: str | None = Field(default=None, max_length=64)
    transmission: str | None = Field(default=None, max_length=64)
    description: str | None = None
    image_urls: list[str] = Field(default_factory=list)
    feature_ids: list[int] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_name(v)


class CarUpdate(BaseModel):
    """Partial update. When image_urls or feature_ids is given it replaces the current set."""

    name: str | None = Field(default=None, max_length=255)
    model: str | None = Field(default=None, max_length=255)
    brand_id: int | None = None
    price: float | None = Field(default=None, ge=0)
    status: CarStatus | None = None
    year_of_manufacture: int | None = Field(default=None, ge=1886, le=2100)
    mileage: int | None = Field(default=None, ge=0)
    color: str | None = Field(default=None, max_length=64)
    fuel_type: str | None = Field(default=None, max_length=64)
    transmission: str | None = Field(default=None, max_length=64)
    description: str | None = None
    image_urls: list[str] | None = None
    feature_ids: list[int] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else require_name(v)


class FeatureOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    cars_count: int = 0
    created_at: datetime
    updated_at: datetime


class FeatureWrite(BaseModel):
    name: str = Field(..., max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_name(v)
