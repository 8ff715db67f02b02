"""StudentGateway - Authenticated CRUD calls against the student API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from roster.gateway.exceptions import AuthorizationDeniedError, RequestFailedError
from roster.gateway.models import StudentRecord, coerce_age
from roster.logging import sanitize_for_log, truncate_output

if TYPE_CHECKING:
    from roster.editor.models import DraftForm
    from roster.session.models import SessionContext

logger = logging.getLogger(__name__)

# Statuses that mean the held credential is missing, expired or insufficient
AUTH_DENIED_STATUSES = frozenset({401, 403})


class StudentGateway:
    """Client for the ``/api/students`` resource.

    Every operation takes the session it acts for and sends its token as a
    bearer credential. Nothing is retried.
    """

    def __init__(self, students_url: str, timeout: float | None = None) -> None:
        """Initialize the gateway.

        Args:
            students_url: Absolute URL of the students collection.
            timeout: Request timeout in seconds; None keeps the httpx default.
        """
        self.students_url = students_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

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

    async def _request(
        self,
        session: SessionContext,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one authenticated request.

        Raises:
            AuthorizationDeniedError: No token is held, or the API answered 401/403.
            RequestFailedError: Transport failure or any other non-2xx status.
        """
        token = session.token
        if not token:
            raise AuthorizationDeniedError(f"{method} {url} attempted without a session token")

        headers = {"Authorization": f"Bearer {token}"}
        logger.debug("%s %s", method, url)
        try:
            response = await self.client.request(method, url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise RequestFailedError(
                sanitize_for_log(f"{method} {url} failed: {e}")
            ) from e

        if response.status_code in AUTH_DENIED_STATUSES:
            logger.info("%s %s denied with %d", method, url, response.status_code)
            raise AuthorizationDeniedError(
                f"{method} {url} denied: {response.status_code}",
                status_code=response.status_code,
            )
        if not response.is_success:
            body = sanitize_for_log(truncate_output(response.text))
            raise RequestFailedError(
                f"{method} {url} failed: {response.status_code} - {body}",
                status_code=response.status_code,
            )
        return response

    async def list(self, session: SessionContext) -> list[StudentRecord]:
        """Fetch the whole collection, in server order.

        Raises:
            AuthorizationDeniedError: Credential rejected.
            RequestFailedError: Request failed or the body is not a list of students.
        """
        response = await self._request(session, "GET", self.students_url)
        try:
            data = response.json()
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            students = [StudentRecord.from_dict(item) for item in data]
        except (ValueError, TypeError, KeyError) as e:
            raise RequestFailedError(f"Malformed student list: {e}") from e

        logger.info("Fetched %d student(s)", len(students))
        return students

    async def create(self, session: SessionContext, draft: DraftForm) -> None:
        """Create a student from a draft. The server assigns the id."""
        await self._request(session, "POST", self.students_url, payload=_payload(draft))
        logger.info("Created student %r", draft.name)

    async def update(self, session: SessionContext, student_id: int, draft: DraftForm) -> None:
        """Replace every field of an existing student."""
        await self._request(
            session, "PUT", f"{self.students_url}/{int(student_id)}", payload=_payload(draft)
        )
        logger.info("Updated student %d", student_id)

    async def delete(self, session: SessionContext, student_id: int) -> None:
        """Delete a student."""
        await self._request(session, "DELETE", f"{self.students_url}/{int(student_id)}")
        logger.info("Deleted student %d", student_id)


def _payload(draft: DraftForm) -> dict[str, Any]:
    return {"name": draft.name, "email": draft.email, "age": coerce_age(draft.age)}
