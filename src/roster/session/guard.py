"""SessionGuard - Gates the roster view on authentication state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from roster.session.models import GuardState

if TYPE_CHECKING:
    from roster.session.models import SessionContext

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    """Front-end hook that moves the user to another destination."""

    def navigate(self, destination: str) -> None:
        """Request navigation to ``destination``."""
        ...


class SessionGuard:
    """Decides on each render whether the roster may be shown.

    The guard remembers the token it last let through, so the initial load is
    signalled once per authentication transition rather than once per render.
    """

    def __init__(
        self,
        session: SessionContext,
        navigator: Navigator,
        login_destination: str = "/login",
    ) -> None:
        self.session = session
        self.navigator = navigator
        self.login_destination = login_destination
        self._admitted_token: str | None = None

    def evaluate(self) -> GuardState:
        """Check the session for one render cycle.

        Returns:
            DENIED after requesting login navigation, ENTERED when the caller
            should perform the initial load, ACTIVE otherwise.
        """
        if not self.session.is_authenticated:
            self._admitted_token = None
            self.navigator.navigate(self.login_destination)
            return GuardState.DENIED

        token = self.session.token
        if token and token != self._admitted_token:
            self._admitted_token = token
            logger.debug("Session became active; initial load due")
            return GuardState.ENTERED
        return GuardState.ACTIVE

    def teardown(self) -> None:
        """Drop the session after the API denied the credential."""
        logger.warning("Credential rejected by the API; ending session")
        self._admitted_token = None
        self.session.logout()
        self.navigator.navigate(self.login_destination)
