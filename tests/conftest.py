"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from roster.gateway import StudentGateway
from roster.session import UserIdentity

API = "http://api.test"
STUDENTS_URL = f"{API}/api/students"


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@dataclass
class FakeSession:
    """In-memory authentication collaborator."""

    token: str | None = "test-token"
    user: UserIdentity | None = field(
        default_factory=lambda: UserIdentity(id=1, username="admin", full_name="Ada Admin")
    )
    logout_calls: int = 0

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def logout(self) -> None:
        self.logout_calls += 1
        self.token = None
        self.user = None


class FakeNavigator:
    """Records requested destinations."""

    def __init__(self) -> None:
        self.destinations: list[str] = []

    def navigate(self, destination: str) -> None:
        self.destinations.append(destination)


class FakePrompter:
    """Answers confirmations with a fixed value and records notices."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.alerts: list[str] = []
        self.questions: list[str] = []

    async def alert(self, message: str) -> None:
        self.alerts.append(message)

    async def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer


class FakeApi:
    """Request recorder and responder for ``httpx.MockTransport``.

    ``responses`` maps ``"METHOD /path"`` to a queue of (status, body) pairs;
    the last pair of a queue is reused once the others are consumed. Unmapped
    requests get 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, list[tuple[int, Any]]] = {}

    def on(self, method: str, path: str, *responses: tuple[int, Any]) -> None:
        self.responses[f"{method} {path}"] = list(responses)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and (path is None or r.url.path == path)
        ]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.responses.get(f"{request.method} {request.url.path}")
        if not queue:
            return httpx.Response(404, json={"message": "not found"})
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def gateway(fake_api: FakeApi) -> StudentGateway:
    """Gateway whose HTTP client talks to ``fake_api``."""
    gateway = StudentGateway(STUDENTS_URL)
    gateway._client = httpx.AsyncClient(transport=fake_api.transport())
    return gateway
