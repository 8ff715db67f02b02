"""ResourceStore - The in-memory student list and its loading/error flags."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roster.gateway import AuthorizationDeniedError, GatewayError

if TYPE_CHECKING:
    from roster.gateway import StudentGateway, StudentRecord
    from roster.session import SessionContext, SessionGuard

logger = logging.getLogger(__name__)

DEFAULT_LOAD_ERROR = "Failed to load students. Make sure the backend is running."


class ResourceStore:
    """Holds the authoritative student list as last fetched from the API.

    The list is only ever replaced wholesale by ``refresh``. Overlapping
    refreshes are not serialized: by default the last response to arrive
    wins. With ``discard_stale_responses`` each refresh takes a generation
    number and only the latest generation may write the list or the flags.
    """

    def __init__(
        self,
        gateway: StudentGateway,
        guard: SessionGuard,
        load_error: str = DEFAULT_LOAD_ERROR,
        discard_stale_responses: bool = False,
    ) -> None:
        """Initialize the store.

        Args:
            gateway: Gateway used for the list call.
            guard: Guard whose teardown handles a rejected credential.
            load_error: Banner text when a refresh fails.
            discard_stale_responses: Ignore responses older than the latest request.
        """
        self.gateway = gateway
        self.guard = guard
        self.load_error = load_error
        self.discard_stale_responses = discard_stale_responses
        self.students: list[StudentRecord] = []
        self.loading = False
        self.error: str | None = None
        self._generation = 0

    async def refresh(self, session: SessionContext) -> None:
        """Replace the list with the server's current collection.

        Does nothing without a token. A rejected credential goes to the guard's
        teardown; any other failure sets the banner and keeps the old list.
        """
        if not session.token:
            logger.debug("Refresh skipped: no session token")
            return

        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None
        try:
            students = await self.gateway.list(session)
        except AuthorizationDeniedError:
            self.guard.teardown()
        except GatewayError as e:
            logger.error("Refresh failed: %s", e)
            if self._is_current(generation):
                self.error = self.load_error
        else:
            if self._is_current(generation):
                self.students = students
            else:
                logger.debug("Discarding stale refresh #%d", generation)
        finally:
            if self._is_current(generation):
                self.loading = False

    def report_error(self, message: str) -> None:
        """Show a banner for a failed operation."""
        self.error = message

    def _is_current(self, generation: int) -> bool:
        return not self.discard_stale_responses or generation == self._generation
