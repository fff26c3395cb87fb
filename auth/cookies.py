"""
auth/cookies.py -- Session transport over an HTTP cookie.

The session cookie attributes:
  httponly=True: JS cannot read the cookie (XSS mitigation).
  samesite="strict" (Settings.cookie_samesite): never sent on cross-site
      requests -- CSRF mitigation for the state-changing endpoints.
  secure=True (Settings.secure_cookies): only sent over HTTPS. Turn off
      only for plain-HTTP local development.
  max_age: matches the token expiry so both expire together.

extract_token() also accepts an Authorization: Bearer header. Register and
login return the token in the body, and non-browser clients send it back
that way. The cookie wins when both are present.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from core.config import get_settings


def attach_session_cookie(response: Response, token: str) -> None:
    """Write the session token as an httpOnly cookie on the response."""
    settings = get_settings()
    response.set_cookie(
        settings.cookie_name,
        value=token,
        path="/",
        httponly=True,
        samesite=settings.cookie_samesite,
        secure=settings.secure_cookies,
        max_age=settings.token_expire_seconds,
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie immediately.

    Path and flags must match attach_session_cookie() or browsers keep the
    original cookie.
    """
    settings = get_settings()
    response.delete_cookie(
        settings.cookie_name,
        path="/",
        httponly=True,
        samesite=settings.cookie_samesite,
        secure=settings.secure_cookies,
    )


def extract_token(request: Request) -> str | None:
    """Return the raw session token from the request, or None if absent."""
    token = request.cookies.get(get_settings().cookie_name)
    if token:
        return token

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None
