# userhub/core/exceptions.py
"""
Error taxonomy for the account service.

Every failure that should reach a client is an ApiError subclass carrying the
HTTP status it maps to. A single set of handlers (see exception_handlers.py)
renders them into the uniform error envelope.
"""
from typing import Any


class ApiError(Exception):
    """Base class for errors rendered as `{statusCode, data, message, success, errors}`."""

    status_code: int = 500
    default_message: str = "Something went wrong."

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        errors: list[Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request."


class ConflictError(ApiError):
    """Uniqueness violation."""

    status_code = 409
    default_message = "The username or email already exists."


class AuthError(ApiError):
    """Bad credential or token. Call sites pick 400 or 401."""

    status_code = 401
    default_message = "Unauthorized request."


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found."


class InternalError(ApiError):
    """Post-write consistency check failed, or token minting failed."""

    status_code = 500
    default_message = "Internal server error."


class InvalidTokenError(AuthError):
    """Token signature, structure or expiry check failed."""

    default_message = "Invalid token."


class ExpiredOrReusedTokenError(AuthError):
    """Refresh token no longer matches the one recorded for its user."""

    default_message = "Refresh token is expired or used."
