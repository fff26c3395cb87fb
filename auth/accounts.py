"""
auth/accounts.py -- Account operations: register, login, profile, admin delete.

Each function validates its input before touching the store and raises an
AuthError subclass (auth/errors.py) on failure. Nothing here knows about
HTTP: routes in api/routes/v1/users.py attach/clear the cookie and shape
the response.

All functions take the UserStore explicitly. There is no module-level store
or "current user" singleton; the caller passes the resolved user id.

Logging: successes are logged with the user id only. Emails, passwords, and
digests are never logged.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.exc import SQLAlchemyError

from auth.errors import BadRequest, InternalError, NotFound
from auth.models import User
from auth.passwords import hash_password, verify_password
from auth.store import UserStore
from auth.tokens import InvalidTokenError, issue_token, verify_token
from core.config import get_settings

logger = logging.getLogger("authkit.auth")

# Deliberately loose: one @, something on each side, a dot in the domain.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _require(*values: str | None) -> None:
    if any(v is None or not str(v).strip() for v in values):
        raise BadRequest("All fields are required")


# ---------------------------------------------------------------------------
# Anonymous -> Authenticated
# ---------------------------------------------------------------------------


def register(store: UserStore, name: str | None, email: str | None, password: str | None) -> tuple[User, str]:
    """Create an account and mint its first session token.

    All-or-nothing: if the token cannot be issued after the record was
    written, the record is deleted again before InternalError is raised.

    Raises:
        BadRequest: missing field, malformed email, or short password.
        Conflict:   email already registered (raised by the store).
        InternalError: token issuance failed.
    """
    _require(name, email, password)
    if not _EMAIL_RE.match(email.strip()):
        raise BadRequest("Please add a valid email")
    min_length = get_settings().password_min_length
    if len(password) < min_length:
        raise BadRequest(f"Password must be at least {min_length} characters")

    user = store.create(name, email, hash_password(password))
    try:
        token = issue_token(user.id)
    except Exception as exc:
        logger.exception("Token issuance failed for new user %s; rolling back registration", user.id)
        try:
            store.delete_by_id(user.id)
        except SQLAlchemyError:
            logger.exception("Rollback of new user %s failed", user.id)
        raise InternalError("Invalid user data") from exc

    logger.info("Registered user %s", user.id)
    return user, token


def login(store: UserStore, email: str | None, password: str | None) -> tuple[User, str]:
    """Check credentials and mint a session token.

    Raises:
        BadRequest: missing field or password mismatch.
        NotFound:   no account for that email.
    """
    _require(email, password)
    user = store.find_by_email(email)
    if user is None:
        raise NotFound("User not found, sign up!")
    if not verify_password(password, user.hashed_password):
        logger.info("Failed login for user %s", user.id)
        raise BadRequest("Invalid credentials")

    token = issue_token(user.id)
    logger.info("User %s logged in", user.id)
    return user, token


def login_status(token: str | None) -> bool:
    """Return True if token is a currently valid session token.

    Only the signature and expiry are checked. Since there is no revocation,
    a token from before a logout still reports True.
    """
    if not token:
        return False
    try:
        verify_token(token)
    except InvalidTokenError:
        return False
    return True


# ---------------------------------------------------------------------------
# Authenticated
# ---------------------------------------------------------------------------


def get_profile(store: UserStore, user_id: str) -> User:
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFound()
    return user


def update_profile(
    store: UserStore,
    user_id: str,
    name: str | None = None,
    bio: str | None = None,
    photo: str | None = None,
) -> User:
    """Apply a profile patch and return the stored result.

    Only name, bio, and photo are accepted. A value that is None or empty
    leaves the field unchanged.
    """
    user = get_profile(store, user_id)
    if name and name.strip():
        user.name = name.strip()
    if bio:
        user.bio = bio
    if photo:
        user.photo = photo
    return store.save(user)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


def delete_user(store: UserStore, target_id: str, acting_user_id: str | None = None) -> None:
    """Delete an account by id. The admin check happens in require_admin.

    An admin may delete any account, including their own.
    """
    if not store.delete_by_id(target_id):
        raise NotFound()
    logger.info("User %s deleted by %s", target_id, acting_user_id or "system")
