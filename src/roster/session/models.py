"""Data models for the session layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol


@dataclass(frozen=True)
class UserIdentity:
    """The logged-in user as reported by the auth endpoints."""

    id: int | None
    username: str
    email: str = ""
    full_name: str = ""

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserIdentity:
        """Build from an auth response or a saved session (camelCase or snake_case)."""
        return cls(
            id=data.get("id"),
            username=data["username"],
            email=data.get("email") or "",
            full_name=data.get("fullName") or data.get("full_name") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
        }


class SessionContext(Protocol):
    """Read-mostly view of the authentication collaborator.

    The roster core only reads from it and, on teardown, calls ``logout``.
    """

    @property
    def user(self) -> UserIdentity | None: ...

    @property
    def token(self) -> str | None: ...

    @property
    def is_authenticated(self) -> bool: ...

    def logout(self) -> None: ...


class GuardState(StrEnum):
    """Outcome of one guard evaluation."""

    DENIED = "denied"  # not authenticated; navigation to login requested
    ENTERED = "entered"  # just became authenticated with a token; load now
    ACTIVE = "active"  # already authenticated; nothing to trigger
