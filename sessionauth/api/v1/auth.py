"""Login, logout and session lookup endpoints, plus auth dependencies."""

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from sessionauth.core.config import get_settings
from sessionauth.core.database import get_db
from sessionauth.schemas.auth import (
    ApiResponse,
    IdentityCategory,
    LoginData,
    NormalizedIdentity,
    SessionInfo,
    SessionRecord,
)
from sessionauth.services.errors import SESSION_INVALID, AuthServiceError
from sessionauth.services.identity import resolve_identity
from sessionauth.services.login import error_response, login
from sessionauth.services.sessions import revoke_session

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

MAX_LOGIN_BODY_BYTES = 16 * 1024


def _respond(result: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=result.http_status, content=result.to_body())


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "code": SESSION_INVALID},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _parse_login_body(raw: bytes) -> dict[str, Any] | ApiResponse:
    """Decode the JSON object body, or return the error envelope to send instead."""
    if not raw or not raw.strip():
        return error_response("NO_DATA", "No data received", 400)
    if len(raw) > MAX_LOGIN_BODY_BYTES:
        return error_response("INVALID_JSON", "Invalid JSON format", 400)
    try:
        data = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response("INVALID_JSON", "Invalid JSON format", 400)
    if not isinstance(data, dict):
        return error_response("INVALID_JSON", "Invalid JSON format", 400)
    return data


async def _handle_login(request: Request, db: Session, category: IdentityCategory) -> JSONResponse:
    parsed = _parse_login_body(await request.body())
    if isinstance(parsed, ApiResponse):
        return _respond(parsed)
    # bcrypt and the DB calls block; keep them off the event loop.
    result = await run_in_threadpool(
        login,
        db,
        category,
        parsed.get("username"),
        parsed.get("password"),
        ttl_hours=get_settings().SESSION_TTL_HOURS,
    )
    return _respond(result)


@router.post("/consumer/login")
async def consumer_login(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """
    Authenticate a consumer with {"username", "password"}; returns user and session.
    Send the session_id on later requests as: Authorization: Bearer <session_id>
    """
    return await _handle_login(request, db, "consumer")


@router.post("/retailer/login")
async def retailer_login(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Authenticate a retailer; same contract as consumer login."""
    return await _handle_login(request, db, "retailer")


@router.post("/admin/login")
async def admin_login(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Authenticate an administrator; same contract as consumer login."""
    return await _handle_login(request, db, "admin")


def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> tuple[NormalizedIdentity, SessionRecord]:
    """Dependency: require a live session token and return (identity, session). Raises 401 otherwise."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        resolved = resolve_identity(db, credentials.credentials)
    except AuthServiceError as e:
        raise HTTPException(
            status_code=e.http_status,
            detail={"message": e.message, "code": e.code},
        ) from e
    if resolved is None:
        raise _unauthorized("Session not found or expired")
    return resolved


def get_current_identity(
    current: Annotated[tuple[NormalizedIdentity, SessionRecord], Depends(get_current_session)],
) -> NormalizedIdentity:
    """Dependency: the normalized identity behind the presented session token."""
    return current[0]


@router.get("/me")
def get_me(
    current: Annotated[tuple[NormalizedIdentity, SessionRecord], Depends(get_current_session)],
) -> JSONResponse:
    """Return the identity and session expiry for the presented token."""
    identity, record = current
    return _respond(
        ApiResponse(
            status="success",
            message="Session is valid",
            code="SESSION_VALID",
            data=LoginData(
                user=identity,
                session=SessionInfo(session_id=record.session_id, expires_at=record.expires_at),
            ),
        )
    )


@router.post("/logout")
def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Revoke the presented session token. Succeeds even if it was already gone."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        revoke_session(db, credentials.credentials)
    except AuthServiceError as e:
        return _respond(error_response(e.code, e.message, e.http_status))
    return _respond(
        ApiResponse(status="success", message="Session cleared successfully", code="LOGOUT_SUCCESS")
    )
