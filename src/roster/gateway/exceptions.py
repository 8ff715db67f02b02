"""Custom exceptions for the student gateway."""

from __future__ import annotations


class GatewayError(Exception):
    """Base exception for student API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthorizationDeniedError(GatewayError):
    """The API rejected the credential (401/403), or no credential is held."""


class RequestFailedError(GatewayError):
    """Non-success response or transport failure for any other reason."""
