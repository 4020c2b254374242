"""ORM models for the dealership inventory: brands, cars, their images and features."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from volterra.models.base import Base, created_at_column, updated_at_column
from volterra.models.enums import CarStatus

car_features = Table(
    "car_features",
    Base.metadata,
    Column("car_id", Integer, ForeignKey("cars.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "feature_id", Integer, ForeignKey("features.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    logo_url = Column(String(2048), nullable=True)
    vehicle_image_url = Column(String(2048), nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    cars = relationship("Car", back_populates="brand", order_by="Car.id")


class Car(Base):
    """A vehicle in stock. Images are ordered by id so the first image is stable."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False, default="")
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    price = Column(Float, nullable=True)
    status = Column(String(16), nullable=False, default=CarStatus.NEW.value)
    year_of_manufacture = Column(Integer, nullable=True)
    mileage = Column(Integer, nullable=True)
    color = Column(String(64), nullable=True)
    fuel_type = Column(String(64), nullable=True)
    transmission = Column(String(64), nullable=True)
    description = Column(Text, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    brand = relationship("Brand", back_populates="cars")
    images = relationship(
        "CarImage",
        back_populates="car",
        order_by="CarImage.id",
        cascade="all, delete-orphan",
    )
    features = relationship(
        "Feature", secondary=car_features, back_populates="cars", order_by="Feature.name"
    )


class CarImage(Base):
    __tablename__ = "car_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    created_at = created_at_column()

    car = relationship("Car", back_populates="images")


class Feature(Base):
    __tablename__ = "features"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    cars = relationship("Car", secondary=car_features, back_populates="features")
