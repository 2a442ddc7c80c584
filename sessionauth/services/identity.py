"""Identity resolver: session token -> normalized identity of its owner.

The three categories share no base table, so each has its own loader and
builder; dispatch is on the category tag stored with the session.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from sessionauth.models import Admin, Consumer, Retailer
from sessionauth.schemas.auth import (
    AdminIdentity,
    ConsumerIdentity,
    NormalizedIdentity,
    RetailerIdentity,
    SessionRecord,
)
from sessionauth.services.errors import translate_db_errors
from sessionauth.services.sessions import token_prefix, validate_session

logger = logging.getLogger(__name__)

IdentityRow = Consumer | Retailer | Admin

# Category tag -> ORM model. Admin's primary key is admin_id.
CATEGORY_MODELS: dict[str, type[IdentityRow]] = {
    "consumer": Consumer,
    "retailer": Retailer,
    "admin": Admin,
}


def _common_fields(row: Any, identity_id: int) -> dict[str, Any]:
    return {
        "id": identity_id,
        "username": row.username,
        "first_name": row.first_name,
        "middle_name": row.middle_name,
        "last_name": row.last_name,
    }


def _consumer_identity(row: Consumer) -> ConsumerIdentity:
    return ConsumerIdentity(
        **_common_fields(row, row.id),
        email=row.email,
        created_at=row.created_at,
        gender=row.gender,
        birthdate=row.birthdate,
        age=row.age,
        location_id=row.location_id,
    )


def _retailer_identity(row: Retailer) -> RetailerIdentity:
    return RetailerIdentity(
        **_common_fields(row, row.id),
        email=row.email,
        created_at=row.created_at,
        location_id=row.location_id,
    )


def _admin_identity(row: Admin) -> AdminIdentity:
    return AdminIdentity(
        **_common_fields(row, row.admin_id),
        admin_type=row.admin_type or "admin",
    )


_BUILDERS: dict[str, Callable[[Any], NormalizedIdentity]] = {
    "consumer": _consumer_identity,
    "retailer": _retailer_identity,
    "admin": _admin_identity,
}


def build_identity(category: str, row: IdentityRow) -> NormalizedIdentity:
    """Project a stored identity row onto its normalized view (no password hash)."""
    try:
        builder = _BUILDERS[category]
    except KeyError:
        raise ValueError(f"Unknown identity category: {category!r}") from None
    return builder(row)


def find_by_username(db: Session, category: str, username: str) -> IdentityRow | None:
    """Exact username match within one category's table."""
    model = CATEGORY_MODELS[category]
    return db.query(model).filter(model.username == username).first()


def find_by_id(db: Session, category: str, identity_id: int) -> IdentityRow | None:
    """Primary-key lookup within one category's table."""
    model = CATEGORY_MODELS[category]
    pk = model.admin_id if model is Admin else model.id
    return db.query(model).filter(pk == identity_id).first()


def identity_for_session(db: Session, record: SessionRecord) -> NormalizedIdentity | None:
    """
    Load the owner of an already-validated session.

    Returns None if the owning account no longer exists, which callers treat
    exactly like an invalid session.
    """
    if record.user_type not in CATEGORY_MODELS:
        logger.warning(
            "Session has unknown category",
            extra={"user_type": record.user_type, "session_prefix": token_prefix(record.session_id)},
        )
        return None
    with translate_db_errors("identity lookup"):
        row = find_by_id(db, record.user_type, record.user_id)
    if row is None:
        logger.info(
            "Session owner no longer exists",
            extra={"user_type": record.user_type, "user_id": record.user_id},
        )
        return None
    return build_identity(record.user_type, row)


def resolve_identity(
    db: Session,
    token: str | None,
    now: datetime | None = None,
) -> tuple[NormalizedIdentity, SessionRecord] | None:
    """
    Validate token and return (identity, session), or None if not found or expired.

    Unknown token, expired session and deleted account all yield None.
    """
    record = validate_session(db, token, now=now)
    if record is None:
        return None
    identity = identity_for_session(db, record)
    if identity is None:
        return None
    return identity, record
