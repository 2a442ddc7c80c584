"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sessionauth.api.v1 import router as v1_router
from sessionauth.core.config import settings
from sessionauth.services.errors import SERVER_ERROR

logger = logging.getLogger(__name__)

# HTTP status -> response code when the raising site did not supply one.
_STATUS_CODES = {
    401: "SESSION_INVALID",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}

app = FastAPI(
    title="Session Auth API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "User-Agent"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(StarletteHTTPException)
async def http_exception_envelope(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error in the {status, message, code} envelope."""
    if isinstance(exc.detail, dict):
        message = str(exc.detail.get("message", ""))
        code = str(exc.detail.get("code", "HTTP_ERROR"))
    elif exc.status_code == 405:
        message = "Method not allowed"
        code = _STATUS_CODES[405]
    else:
        message = str(exc.detail)
        code = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": message, "code": code},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_envelope(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures in full; callers only see the generic SERVER_ERROR envelope."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Internal server error", "code": SERVER_ERROR},
    )


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Session Auth API"}
