"""Custom exceptions for the session layer."""


class AuthError(Exception):
    """Base exception for login/registration failures."""


class InvalidCredentialsError(AuthError):
    """Username or password was rejected."""


class RegistrationError(AuthError):
    """Registration was refused (username or email already taken)."""
