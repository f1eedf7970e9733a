"""Core app configuration, database, and security."""

from travel_api.core.config import Settings, get_settings
from travel_api.core.database import Database, get_db

__all__ = ["Database", "Settings", "get_db", "get_settings"]
