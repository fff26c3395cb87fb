"""
auth/passwords.py -- One-way salted password hashing.

bcrypt is used directly (no passlib wrapper). Its cost factor makes each
guess expensive, which is what low-entropy secrets like passwords need.
The cost comes from Settings.bcrypt_rounds; the salt is embedded in the
digest, so verify_password needs nothing but the stored string.

bcrypt only looks at the first 72 bytes of its input. Longer passwords are
truncated explicitly here so bcrypt 4.x does not raise on them; the API
layer caps password length well above anything a human types.

Neither function logs its arguments.
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings

_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a bcrypt digest of the given plaintext password."""
    rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt digest.

    A malformed digest (truncated column, legacy format) is a mismatch,
    not an error.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
