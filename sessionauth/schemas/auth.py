"""Schemas for login, sessions and the normalized identity view."""

from datetime import date, datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

# Identity partitions. Stored verbatim in user_sessions.user_type.
IdentityCategory = Literal["consumer", "retailer", "admin"]

IDENTITY_CATEGORIES: tuple[str, ...] = ("consumer", "retailer", "admin")

ResponseStatus = Literal["success", "error"]


def _as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (some drivers drop tzinfo on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class IdentityBase(BaseModel):
    """Fields shared by every category. Password hashes never appear here."""

    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str = Field(default="", description="Empty for categories without email.")
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    created_at: datetime | None = Field(
        default=None,
        description="Account creation time; not tracked for administrators.",
    )

    @field_validator("email", "first_name", "middle_name", "last_name", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class ConsumerIdentity(IdentityBase):
    """Consumer view: adds demographic and location fields."""

    role: Literal["consumer"] = "consumer"
    gender: str | None = None
    birthdate: date | None = None
    age: int | None = None
    location_id: int | None = None


class RetailerIdentity(IdentityBase):
    """Retailer view: adds the store location."""

    role: Literal["retailer"] = "retailer"
    location_id: int | None = None


class AdminIdentity(IdentityBase):
    """Administrator view: no email, location or birth fields."""

    role: Literal["admin"] = "admin"
    admin_type: str = Field(default="admin", description="Administrator subtype.")


NormalizedIdentity = Annotated[
    Union[ConsumerIdentity, RetailerIdentity, AdminIdentity],
    Field(discriminator="role"),
]


class SessionRecord(BaseModel):
    """A persisted session as read back from storage (immutable)."""

    model_config = {"from_attributes": True, "frozen": True}

    session_id: str
    user_id: int
    user_type: str
    expires_at: datetime
    created_at: datetime

    @field_validator("expires_at", "created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def is_live(self, now: datetime) -> bool:
        """Liveness is derived, never stored: live iff now < expires_at."""
        return _as_utc(now) < self.expires_at


class SessionInfo(BaseModel):
    """Session fields returned to the caller after login."""

    session_id: str = Field(..., description="Opaque bearer token (64 hex chars).")
    expires_at: datetime


class LoginData(BaseModel):
    """Payload of a successful login or session lookup."""

    user: NormalizedIdentity
    session: SessionInfo


class ApiResponse(BaseModel):
    """
    Envelope for every auth response: status, human message, stable machine code.

    http_status is the transport status class chosen by the service layer; it is
    not serialized into the body.
    """

    status: ResponseStatus
    message: str
    code: str
    data: LoginData | None = None
    http_status: int = Field(default=200, exclude=True)

    def to_body(self) -> dict[str, Any]:
        """JSON-ready body; omits data on errors."""
        body: dict[str, Any] = {
            "status": self.status,
            "message": self.message,
            "code": self.code,
        }
        if self.data is not None:
            body["data"] = self.data.model_dump(mode="json")
        return body
