"""ORM model for issued login sessions."""

from sqlalchemy import Column, DateTime, Index, Integer, String

from sessionauth.models.base import Base


class UserSession(Base):
    """
    One issued session token. Rows are inserted once and only ever deleted.

    A row is live iff now < expires_at; expired rows may linger until purged
    but are never returned by lookups.
    """

    __tablename__ = "user_sessions"
    __table_args__ = (Index("ix_user_sessions_owner", "user_type", "user_id"),)

    session_id = Column(String(64), primary_key=True)
    user_id = Column(Integer, nullable=False)
    user_type = Column(String(32), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
