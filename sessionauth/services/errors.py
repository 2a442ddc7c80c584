"""Error taxonomy for the auth services.

Each error carries the stable machine code and HTTP status class it maps to.
The message is safe to show to callers; driver details stay in the logs.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)

# Machine-readable response codes.
MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
DB_CONNECTION_ERROR = "DB_CONNECTION_ERROR"
SESSION_CREATION_FAILED = "SESSION_CREATION_FAILED"
SERVER_ERROR = "SERVER_ERROR"
SESSION_INVALID = "SESSION_INVALID"


class AuthServiceError(Exception):
    """Base class: a terminal, caller-visible failure of an auth operation."""

    code = SERVER_ERROR
    http_status = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredentialsError(AuthServiceError):
    """Username or password absent or blank. Raised before storage is touched."""

    code = MISSING_CREDENTIALS
    http_status = 400
    default_message = "Username and password are required"


class InvalidCredentialsError(AuthServiceError):
    """Unknown user or wrong password; the two are deliberately indistinguishable."""

    code = INVALID_CREDENTIALS
    http_status = 401
    default_message = "Invalid username or password"


class InfrastructureError(AuthServiceError):
    """Persistence or randomness-source failure. Caller may retry later."""


class DatabaseConnectionError(InfrastructureError):
    """The database could not be reached."""

    code = DB_CONNECTION_ERROR
    default_message = "Database connection failed"


class SessionCreationError(InfrastructureError):
    """The session row could not be written."""

    code = SESSION_CREATION_FAILED
    default_message = "Failed to create session"


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """
    Re-raise database failures as auth errors.

    Connection failures become DatabaseConnectionError; any other SQLAlchemy
    error becomes a generic SERVER_ERROR after being logged in full.
    """
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error("Database unreachable during %s: %s", operation, e)
        raise DatabaseConnectionError() from e
    except SQLAlchemyError as e:
        logger.exception("Database error during %s", operation)
        raise AuthServiceError() from e
