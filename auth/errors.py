"""
auth/errors.py -- Error taxonomy for account and session operations.

Every failure an account operation can report to a client has an ErrorKind.
Operations raise the matching AuthError subclass; api/main.py owns the single
exception handler that turns it into the JSON error envelope, so route code
never builds error responses by hand.

Messages are short and safe to show to end users. Never put emails, ids,
hashes, or exception text from lower layers into them.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    bad_request = "bad_request"
    unauthorized = "unauthorized"
    forbidden = "forbidden"
    not_found = "not_found"
    conflict = "conflict"
    internal_error = "internal_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.bad_request: 400,
    ErrorKind.unauthorized: 401,
    ErrorKind.forbidden: 403,
    ErrorKind.not_found: 404,
    ErrorKind.conflict: 409,
    ErrorKind.internal_error: 500,
}


class AuthError(Exception):
    """Base class for all client-reportable account/session failures."""

    kind: ErrorKind = ErrorKind.internal_error
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class BadRequest(AuthError):
    kind = ErrorKind.bad_request
    default_message = "Invalid request."


class Unauthorized(AuthError):
    kind = ErrorKind.unauthorized
    default_message = "Not authorized, please login!"


class Forbidden(AuthError):
    kind = ErrorKind.forbidden
    default_message = "Only admins can do this!"


class NotFound(AuthError):
    kind = ErrorKind.not_found
    default_message = "User not found"


class Conflict(AuthError):
    kind = ErrorKind.conflict
    default_message = "User already exists"


class InternalError(AuthError):
    kind = ErrorKind.internal_error
