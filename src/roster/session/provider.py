"""TokenAuthProvider - Login, registration and a persisted bearer token."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from roster.logging import sanitize_for_log
from roster.session.exceptions import (
    AuthError,
    InvalidCredentialsError,
    RegistrationError,
)
from roster.session.models import UserIdentity

if TYPE_CHECKING:
    from roster.config import RosterConfig

logger = logging.getLogger(__name__)


class TokenAuthProvider:
    """Authentication collaborator backed by the ``/api/auth`` endpoints.

    Holds the JWT and user identity returned by login or registration. When a
    session file is configured the pair is written there, so a later process
    starts already authenticated; ``logout`` removes it.
    """

    def __init__(
        self,
        auth_url: str,
        session_file: Path | str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the provider and load any saved session.

        Args:
            auth_url: Base URL of the auth endpoints (``.../api/auth``).
            session_file: Where to persist the session; None keeps it in memory.
            timeout: Request timeout in seconds; None keeps the httpx default.
        """
        self.auth_url = auth_url.rstrip("/")
        self.session_file = Path(session_file) if session_file is not None else None
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self._token: str | None = None
        self._user: UserIdentity | None = None
        self._load()

    @classmethod
    def from_config(cls, config: RosterConfig) -> TokenAuthProvider:
        return cls(
            config.api.auth_url,
            session_file=config.session_file,
            timeout=config.api.timeout,
        )

    @property
    def user(self) -> UserIdentity | None:
        return self._user

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            options: dict[str, Any] = {"headers": {"Accept": "application/json"}}
            if self.timeout is not None:
                options["timeout"] = self.timeout
            self._client = httpx.AsyncClient(**options)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def login(self, username: str, password: str) -> UserIdentity:
        """Exchange credentials for a token.

        Raises:
            InvalidCredentialsError: The server answered 401.
            AuthError: Any other failure.
        """
        data = await self._post("login", {"username": username, "password": password})
        return self._start(data)

    async def register(
        self, username: str, email: str, password: str, full_name: str = ""
    ) -> UserIdentity:
        """Create an account and start a session for it.

        Raises:
            RegistrationError: The server answered 400 (username or email taken).
            AuthError: Any other failure.
        """
        data = await self._post(
            "register",
            {"username": username, "email": email, "password": password, "fullName": full_name},
        )
        return self._start(data)

    def logout(self) -> None:
        """Forget the token and identity, and delete the session file."""
        if self._user is not None:
            logger.info("Logging out %s", self._user.username)
        self._token = None
        self._user = None
        if self.session_file is not None:
            self.session_file.unlink(missing_ok=True)

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.auth_url}/{endpoint}"
        try:
            response = await self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise AuthError(f"Cannot reach auth server: {e}") from e

        if response.status_code == 401:
            raise InvalidCredentialsError(_message(response, "Invalid username or password"))
        if response.status_code == 400:
            raise RegistrationError(_message(response, "Registration failed"))
        if not response.is_success:
            raise AuthError(f"Auth request failed: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError("Auth response is not JSON") from e
        if not isinstance(data, dict) or not data.get("token"):
            raise AuthError("Auth response did not include a token")
        return data

    def _start(self, data: dict[str, Any]) -> UserIdentity:
        try:
            user = UserIdentity.from_dict(data)
        except KeyError as e:
            raise AuthError(f"Auth response is missing {e}") from e
        self._token = data["token"]
        self._user = user
        try:
            self._save()
        except OSError as e:
            self._token = None
            self._user = None
            raise AuthError(f"Cannot save session to {self.session_file}: {e}") from e
        logger.info("Session started for %s", user.username)
        return user

    def _save(self) -> None:
        if self.session_file is None or self._user is None:
            return
        self.session_file.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only from creation; fchmod tightens a file left by an older run.
        fd = os.open(self.session_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            os.fchmod(f.fileno(), 0o600)
            json.dump({"token": self._token, "user": self._user.to_dict()}, f)

    def _load(self) -> None:
        if self.session_file is None or not self.session_file.exists():
            return
        try:
            data = json.loads(self.session_file.read_text(encoding="utf-8"))
            token = data["token"]
            user = UserIdentity.from_dict(data["user"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(
                "Ignoring unreadable session file %s: %s",
                self.session_file,
                sanitize_for_log(str(e)),
            )
            return
        if token:
            self._token = token
            self._user = user


def _message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return default
