"""ORM models for the three identity categories.

Consumers, retailers and administrators live in separate tables with no
shared base table. A username is unique within its own table only; the
same string may exist in several categories. (category, id) is the global
identity key.
"""

from sqlalchemy import Column, Date, DateTime, Integer, String, func

from sessionauth.models.base import Base


class Consumer(Base):
    """End-customer account."""

    __tablename__ = "consumer"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, default="")
    first_name = Column(String(255), nullable=False, default="")
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=False, default="")
    gender = Column(String(32), nullable=True)
    birthdate = Column(Date, nullable=True)
    age = Column(Integer, nullable=True)
    location_id = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Retailer(Base):
    """Retailer (store) account."""

    __tablename__ = "retailer"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, default="")
    first_name = Column(String(255), nullable=False, default="")
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=False, default="")
    location_id = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Admin(Base):
    """
    Administrator account.

    No email, location or birth fields. admin_type is the administrator
    subtype (e.g. 'super_admin', 'moderator').
    """

    __tablename__ = "admin"

    admin_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False, default="")
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=False, default="")
    admin_type = Column(String(64), nullable=False, default="admin")
