"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own the
domain shape; the store and account operations do the work. The HTTP shape
of a user (the public profile) lives in api/models.py.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Authorization tier. Closed set: anything else is a data error."""

    user = "user"
    admin = "admin"


@dataclass
class User:
    """A registered account.

    email is stored trimmed and lower-cased, so equality on it is the
    case-insensitive comparison the store relies on for uniqueness.

    hashed_password never leaves the process: api/models.UserProfile has no
    field for it, and nothing logs it.
    """

    id: str
    name: str
    email: str
    hashed_password: str
    role: Role = Role.user
    photo: str = ""
    bio: str = ""
    is_verified: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin


@dataclass(frozen=True)
class SessionToken:
    """Decoded claims of a verified session token."""

    user_id: str
    issued_at: datetime
    expires_at: datetime
