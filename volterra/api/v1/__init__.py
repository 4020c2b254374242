"""API routes."""

from fastapi import APIRouter

from volterra.api.v1 import (
    activity,
    auth,
    brands,
    cars,
    dashboard,
    features,
    health,
    members,
    sell_listings,
    service_bookings,
    services,
    tickets,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(brands.router, prefix="/brands", tags=["brands"])
router.include_router(cars.router, prefix="/cars", tags=["cars"])
router.include_router(features.router, prefix="/features", tags=["features"])
router.include_router(members.router, prefix="/members", tags=["members"])
router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
router.include_router(sell_listings.router, prefix="/sell-listings", tags=["sell-listings"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(
    service_bookings.router, prefix="/service-bookings", tags=["service-bookings"]
)
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(activity.router, prefix="/user-activity", tags=["user-activity"])
