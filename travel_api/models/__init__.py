"""SQLAlchemy ORM models."""

from travel_api.models.base import Base
from travel_api.models.user import User

__all__ = ["Base", "User"]
