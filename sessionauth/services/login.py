"""Login orchestrator: credentials -> session -> response envelope.

The only place auth errors are mapped to response codes. Every path ends in
exactly one ApiResponse; nothing is retried.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from sessionauth.schemas.auth import ApiResponse, IdentityCategory, LoginData, SessionInfo
from sessionauth.services.credentials import clean_credentials, verify_credentials
from sessionauth.services.errors import SERVER_ERROR, AuthServiceError
from sessionauth.services.sessions import DEFAULT_TTL_HOURS, create_session

logger = logging.getLogger(__name__)

# Category -> (success message, success code).
LOGIN_SUCCESS: dict[str, tuple[str, str]] = {
    "consumer": ("Consumer login successful", "CONSUMER_LOGIN_SUCCESS"),
    "retailer": ("Retailer login successful", "RETAILER_LOGIN_SUCCESS"),
    "admin": ("Admin login successful", "ADMIN_LOGIN_SUCCESS"),
}


def error_response(code: str, message: str, http_status: int) -> ApiResponse:
    """Build an error envelope."""
    return ApiResponse(status="error", message=message, code=code, http_status=http_status)


def login(
    db: Session,
    category: IdentityCategory,
    username: object,
    password: object,
    ttl_hours: int = DEFAULT_TTL_HOURS,
    now: datetime | None = None,
) -> ApiResponse:
    """
    Authenticate against one category and issue a session.

    Outcomes: <CATEGORY>_LOGIN_SUCCESS (200), MISSING_CREDENTIALS (400),
    INVALID_CREDENTIALS (401), DB_CONNECTION_ERROR (500),
    SESSION_CREATION_FAILED (500), SERVER_ERROR (500).
    """
    success_message, success_code = LOGIN_SUCCESS[category]
    try:
        username, password = clean_credentials(username, password)
        identity = verify_credentials(db, category, username, password)
        record = create_session(db, identity.id, category, ttl_hours=ttl_hours, now=now)
    except AuthServiceError as e:
        return error_response(e.code, e.message, e.http_status)
    except Exception:
        logger.exception("Login failed unexpectedly", extra={"user_type": category})
        return error_response(SERVER_ERROR, "Internal server error", 500)

    logger.info(
        "Login succeeded",
        extra={"user_type": category, "user_id": identity.id},
    )
    return ApiResponse(
        status="success",
        message=success_message,
        code=success_code,
        data=LoginData(
            user=identity,
            session=SessionInfo(session_id=record.session_id, expires_at=record.expires_at),
        ),
    )
