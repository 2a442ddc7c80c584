"""Credential verifier: username/password -> normalized identity."""

import logging

from sqlalchemy.orm import Session

from sessionauth.core.security import (
    PASSWORD_MAX_LEN,
    USERNAME_MAX_LEN,
    hash_password,
    verify_password,
)
from sessionauth.schemas.auth import IDENTITY_CATEGORIES, NormalizedIdentity
from sessionauth.services.errors import (
    InvalidCredentialsError,
    MissingCredentialsError,
    translate_db_errors,
)
from sessionauth.services.identity import build_identity, find_by_username

logger = logging.getLogger(__name__)

# Checked against when the username is unknown so both failure paths pay one bcrypt verify.
_DUMMY_HASH = hash_password("unknown-user-placeholder")


def clean_credentials(username: object, password: object) -> tuple[str, str]:
    """
    Trim both fields and require them to be non-empty strings.

    Raises MissingCredentialsError otherwise. Never touches storage.
    """
    if not isinstance(username, str) or not isinstance(password, str):
        raise MissingCredentialsError()
    username = username.strip()
    password = password.strip()
    if not username or not password:
        raise MissingCredentialsError()
    return username, password


def verify_credentials(
    db: Session,
    category: str,
    username: object,
    password: object,
) -> NormalizedIdentity:
    """
    Look up username in the category's table and check the password.

    Unknown username and wrong password both raise InvalidCredentialsError
    with the same message so accounts cannot be enumerated.
    """
    if category not in IDENTITY_CATEGORIES:
        raise ValueError(f"Unknown identity category: {category!r}")
    username, password = clean_credentials(username, password)

    # Over-long input can never match a stored account.
    if len(username) > USERNAME_MAX_LEN or len(password) > PASSWORD_MAX_LEN:
        raise InvalidCredentialsError()

    with translate_db_errors("credential lookup"):
        row = find_by_username(db, category, username)
    if row is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Login rejected", extra={"user_type": category, "reason": "unknown_user"})
        raise InvalidCredentialsError()
    if not verify_password(password, row.password_hash):
        logger.info("Login rejected", extra={"user_type": category, "reason": "bad_password"})
        raise InvalidCredentialsError()
    return build_identity(category, row)
