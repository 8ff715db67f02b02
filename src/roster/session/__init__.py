"""Session layer - Authentication collaborator and the guard built on it."""

from roster.session.exceptions import (
    AuthError,
    InvalidCredentialsError,
    RegistrationError,
)
from roster.session.guard import Navigator, SessionGuard
from roster.session.models import GuardState, SessionContext, UserIdentity
from roster.session.provider import TokenAuthProvider

__all__ = [
    "AuthError",
    "GuardState",
    "InvalidCredentialsError",
    "Navigator",
    "RegistrationError",
    "SessionContext",
    "SessionGuard",
    "TokenAuthProvider",
    "UserIdentity",
]
