"""
auth/dependencies.py -- FastAPI Depends() helpers for authorization.

The session token arrives via the "token" cookie (or a Bearer header, see
auth/cookies.py). Both converge on a User looked up fresh from the store,
so a deleted account loses access immediately even though its token is
still cryptographically valid.

require_session() raises Unauthorized if unauthenticated.
require_admin() depends on require_session() and raises Forbidden if the
resolved user is not an admin.

The resolved user is also stored on request.state.user for code that only
has the Request.

Layer rule: no imports from api/.
  auth/dependencies.py may import from fastapi (for Depends/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, Request

from auth.cookies import extract_token
from auth.errors import Forbidden, Unauthorized
from auth.models import User
from auth.store import UserStore
from auth.tokens import InvalidTokenError, verify_token


def require_session(request: Request) -> User:
    """Require a valid session. Raises Unauthorized (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(require_session)): ...
    """
    token = extract_token(request)
    if not token:
        raise Unauthorized("Not authorized, please login!")
    try:
        session = verify_token(token)
    except InvalidTokenError:
        raise Unauthorized("Not authorized, token failed!")

    user_store: UserStore = request.app.state.user_store
    user = user_store.find_by_id(session.user_id)
    if user is None:
        raise Unauthorized("Not authorized, user not found!")

    request.state.user = user
    return user


def require_admin(user: User = Depends(require_session)) -> User:
    """Require the admin role. Raises 401 if unauthenticated, 403 if not admin.

    Use as a FastAPI dependency:
        @router.delete("/admin-only")
        def route(admin: User = Depends(require_admin)): ...
    """
    if not user.is_admin:
        raise Forbidden("Only admins can do this!")
    return user
