"""SQLAlchemy ORM models."""

from sessionauth.models.base import Base
from sessionauth.models.identity import Admin, Consumer, Retailer
from sessionauth.models.session import UserSession

__all__ = ["Admin", "Base", "Consumer", "Retailer", "UserSession"]
