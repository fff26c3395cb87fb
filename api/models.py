"""
API request and response models for AuthKit REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request models make every field optional so that a missing field reaches the
account operation and is reported as 400 "All fields are required" rather
than a schema error. Unknown fields are ignored, which is what keeps role,
email, and password out of PATCH /user.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import Role, User

# Far above any human password; bcrypt only reads 72 bytes anyway.
_PASSWORD_MAX = 256


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/register."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = Field(default=None, max_length=_PASSWORD_MAX)


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/login."""

    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = Field(default=None, max_length=_PASSWORD_MAX)


class ProfilePatch(BaseModel):
    """Request body for PATCH /api/v1/user. Only these three fields are writable."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=2000)
    photo: Optional[str] = Field(default=None, max_length=2048)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserProfile(BaseModel):
    """Public profile: every User field that is safe to return to clients.

    There is no password field here, so the digest cannot leak through any
    endpoint that returns this model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    email: str
    role: Role
    photo: str
    bio: str
    is_verified: bool = Field(alias="isVerified")

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            photo=user.photo,
            bio=user.bio,
            is_verified=user.is_verified,
        )


class AuthResponse(UserProfile):
    """Response for register and login: the public profile plus the token."""

    token: str

    @classmethod
    def from_user_and_token(cls, user: User, token: str) -> "AuthResponse":
        return cls(**UserProfile.from_user(user).model_dump(), token=token)


class MessageResponse(BaseModel):
    """Plain confirmation payload (logout, admin delete)."""

    model_config = ConfigDict(frozen=True)

    message: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
