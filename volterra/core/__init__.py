"""Settings, database sessions and credential helpers."""

from volterra.core.config import Settings, get_settings, settings
from volterra.core.database import SessionLocal, get_db, session_scope

__all__ = ["Settings", "get_settings", "settings", "SessionLocal", "get_db", "session_scope"]
