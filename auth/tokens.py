"""
auth/tokens.py -- Session token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       only the user id (sub), issue time (iat), and expiry (exp). Role is
       deliberately NOT a claim: require_admin reads the role from the store
       on every request, so a role change takes effect without re-login.

  Expiry: Settings.token_expire_seconds (30 days by default). There is no
       server-side revocation list -- a token stays valid until exp, even
       after the user logs out. Logout only clears the cookie.

  SECRET_KEY: sourced from core.config.get_settings(). Never derived from
       request data.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.models import SessionToken
from core.config import get_settings

_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Token is malformed, badly signed, expired, or missing claims."""


def issue_token(user_id: str, expire_seconds: int = 0) -> str:
    """Encode a signed session token for user_id.

    Args:
        user_id:        Stable user id stored as the JWT subject.
        expire_seconds: Lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds.
    """
    settings = get_settings()
    duration = expire_seconds if expire_seconds > 0 else settings.token_expire_seconds
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=duration),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=_ALGORITHM)


def verify_token(token: str) -> SessionToken:
    """Decode and verify a session token.

    Raises InvalidTokenError on any failure. jose checks the signature and
    the exp claim; the remaining claim checks happen here.
    """
    if not token:
        raise InvalidTokenError("empty token")
    try:
        payload = jwt.decode(token, get_settings().secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    sub = payload.get("sub")
    iat = payload.get("iat")
    exp = payload.get("exp")
    if not isinstance(sub, str) or not sub:
        raise InvalidTokenError("missing sub claim")
    if not isinstance(iat, (int, float)) or not isinstance(exp, (int, float)):
        raise InvalidTokenError("missing iat/exp claim")

    return SessionToken(
        user_id=sub,
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
