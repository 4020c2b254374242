"""ASGI entrypoint for the dealership admin API: env loading, CORS and router mounting."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from volterra.api.v1 import router as api_router
from volterra.core.config import settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Volterra Admin API",
    version="0.1.0",
    description="Inventory, members, listings, bookings and tickets for the Volterra Automotive admin.",
)

# The session cookie is credentialed, so prod lists its origins explicitly.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Redirect-Location"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)

logger.info("Volterra Admin API configured", extra={"app_env": settings.APP_ENV})


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Volterra Admin API", "api": settings.API_PREFIX}
