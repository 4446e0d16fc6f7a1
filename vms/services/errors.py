"""Errors raised by the remote backend adapter."""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class BackendError(Exception):
    """Base class; ``message`` is safe to show to the volunteer."""

    def __init__(self, message: str | None = None):
        self.message = message or GENERIC_ERROR_MESSAGE
        super().__init__(self.message)


class AuthenticationError(BackendError):
    """Credentials or session token rejected by the identity provider."""


class NotFoundError(BackendError):
    pass


class ConflictError(BackendError):
    """Business rule or uniqueness violation, e.g. joining twice."""


class BackendUnavailableError(BackendError):
    """Transport failure or an error the adapter could not classify."""

    def __init__(self, message: str | None = None):
        super().__init__(GENERIC_ERROR_MESSAGE)
        self.detail = message


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "AuthenticationError",
    "BackendError",
    "BackendUnavailableError",
    "ConflictError",
    "NotFoundError",
]
