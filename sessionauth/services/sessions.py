"""Session store: create, validate, revoke and purge login sessions.

Expiry is enforced lazily at read time; no row is ever updated in place.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sessionauth.core.security import generate_session_token, is_well_formed_token
from sessionauth.models import UserSession
from sessionauth.schemas.auth import IDENTITY_CATEGORIES, SessionRecord
from sessionauth.services.errors import SessionCreationError, translate_db_errors

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 24


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def token_prefix(token: str) -> str:
    """Short, non-secret prefix of a token for log lines."""
    return (token or "")[:8]


def create_session(
    db: Session,
    user_id: int,
    user_type: str,
    ttl_hours: int = DEFAULT_TTL_HOURS,
    now: datetime | None = None,
) -> SessionRecord:
    """
    Issue and persist a new session for (user_type, user_id).

    expires_at = created_at + ttl_hours. Raises SessionCreationError if the
    token cannot be generated or the insert is rejected; the transaction is
    rolled back first.
    """
    if user_type not in IDENTITY_CATEGORIES:
        raise ValueError(f"user_type must be one of {IDENTITY_CATEGORIES}, got {user_type!r}")
    if ttl_hours < 1:
        raise ValueError("ttl_hours must be at least 1")

    created_at = now or _utcnow()
    expires_at = created_at + timedelta(hours=ttl_hours)
    try:
        token = generate_session_token()
    except OSError as e:
        logger.error("Randomness source unavailable: %s", e)
        raise SessionCreationError() from e

    row = UserSession(
        session_id=token,
        user_id=user_id,
        user_type=user_type,
        expires_at=expires_at,
        created_at=created_at,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "Session creation failed",
            extra={"user_type": user_type, "user_id": user_id, "reason": str(e)[:500]},
        )
        raise SessionCreationError() from e

    logger.info(
        "Session created",
        extra={
            "user_type": user_type,
            "user_id": user_id,
            "session_prefix": token_prefix(token),
            "expires_at": expires_at.isoformat(),
        },
    )
    return SessionRecord(
        session_id=token,
        user_id=user_id,
        user_type=user_type,
        expires_at=expires_at,
        created_at=created_at,
    )


def validate_session(
    db: Session,
    token: str | None,
    now: datetime | None = None,
) -> SessionRecord | None:
    """
    Return the live session for token, or None if it is unknown or expired.

    Token match and expiry are checked in one query, so an expired session
    is indistinguishable from one that never existed.
    """
    if not is_well_formed_token(token):
        return None
    now = now or _utcnow()
    with translate_db_errors("session validation"):
        row = (
            db.query(UserSession)
            .filter(UserSession.session_id == token, UserSession.expires_at > now)
            .first()
        )
    if row is None:
        return None
    return SessionRecord.model_validate(row)


def revoke_session(db: Session, token: str | None) -> bool:
    """
    Delete the session for token. Idempotent: unknown tokens are not an error.

    Returns True if a row was deleted.
    """
    if not token:
        return False
    with translate_db_errors("session revocation"):
        try:
            deleted = (
                db.query(UserSession)
                .filter(UserSession.session_id == token)
                .delete(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
    if deleted:
        logger.info("Session revoked", extra={"session_prefix": token_prefix(token)})
    return deleted > 0


def count_live_sessions(db: Session, now: datetime | None = None) -> int:
    """Number of sessions that have not expired yet."""
    now = now or _utcnow()
    return db.query(UserSession).filter(UserSession.expires_at > now).count()


def purge_expired_sessions(db: Session, now: datetime | None = None) -> int:
    """
    Physically delete sessions whose expires_at has passed. Idempotent.

    Lookups already ignore these rows; this only reclaims space.
    """
    now = now or _utcnow()
    deleted_count = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= now)
        .delete(synchronize_session=False)
    )
    db.commit()

    if deleted_count > 0:
        logger.info(
            "Expired sessions purged: cutoff=%s, sessions_deleted=%s",
            now.isoformat(),
            deleted_count,
        )
    return deleted_count
