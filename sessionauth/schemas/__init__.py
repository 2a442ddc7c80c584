"""Pydantic request/response schemas."""

from sessionauth.schemas.auth import (
    IDENTITY_CATEGORIES,
    AdminIdentity,
    ApiResponse,
    ConsumerIdentity,
    IdentityCategory,
    LoginData,
    NormalizedIdentity,
    RetailerIdentity,
    SessionInfo,
    SessionRecord,
)
from sessionauth.schemas.health import HealthResponse

__all__ = [
    "IDENTITY_CATEGORIES",
    "AdminIdentity",
    "ApiResponse",
    "ConsumerIdentity",
    "HealthResponse",
    "IdentityCategory",
    "LoginData",
    "NormalizedIdentity",
    "RetailerIdentity",
    "SessionInfo",
    "SessionRecord",
]
