"""Core app configuration and database."""

from sessionauth.core.config import get_settings, settings
from sessionauth.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
