"""Password hashing and session token generation for authentication."""

import re
import secrets

import bcrypt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# 32 random bytes -> 64 hex characters.
SESSION_TOKEN_BYTES = 32
SESSION_TOKEN_LENGTH = SESSION_TOKEN_BYTES * 2

_TOKEN_PATTERN = re.compile(r"[0-9a-f]{64}")

# Upper bounds for login input; anything longer cannot match a stored account.
USERNAME_MAX_LEN = 255
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def generate_session_token() -> str:
    """
    Return a new opaque session token: 32 bytes from the OS CSPRNG, hex-encoded.

    No uniqueness check is made; the primary key on user_sessions.session_id
    rejects the (negligible) collision.
    """
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def is_well_formed_token(token: str | None) -> bool:
    """True if token has the shape of an issued session token (64 lowercase hex chars)."""
    if not token:
        return False
    return _TOKEN_PATTERN.fullmatch(token) is not None
