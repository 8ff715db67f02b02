"""RosterController - Wires session, store, gateway, dialog and filter together."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from roster.editor import DraftValidationError, EditSession
from roster.filtering import filter_students
from roster.gateway import AuthorizationDeniedError, GatewayError, StudentGateway
from roster.session import GuardState, SessionGuard
from roster.store import DEFAULT_LOAD_ERROR, ResourceStore

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from roster.config import RosterConfig
    from roster.gateway import StudentRecord
    from roster.session import Navigator, SessionContext

logger = logging.getLogger(__name__)

FILL_ALL_FIELDS = "Please fill in all fields"
CONFIRM_DELETE = "Are you sure you want to delete this student?"


class Prompter(Protocol):
    """Front-end hook for blocking notices and yes/no questions."""

    async def alert(self, message: str) -> None:
        """Show a notice the user must acknowledge."""
        ...

    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question; True only on explicit confirmation."""
        ...


class RosterController:
    """Drives the roster view: the user actions and the state they read.

    Every successful mutation is followed by exactly one authoritative
    refresh; nothing is patched into the list locally. A rejected credential
    on any call ends the session instead of showing an error.
    """

    def __init__(
        self,
        session: SessionContext,
        gateway: StudentGateway,
        navigator: Navigator,
        prompter: Prompter,
        login_destination: str = "/login",
        load_error: str = DEFAULT_LOAD_ERROR,
        discard_stale_responses: bool = False,
    ) -> None:
        """Initialize the controller.

        Args:
            session: Authentication collaborator passed to every API call.
            gateway: Student API client.
            navigator: Used to send the user to the login destination.
            prompter: Used for the validation notice and delete confirmation.
            login_destination: Where unauthenticated users are sent.
            load_error: Banner text when the list cannot be loaded.
            discard_stale_responses: Ignore refresh responses older than the latest.
        """
        self.session = session
        self.gateway = gateway
        self.prompter = prompter
        self.guard = SessionGuard(session, navigator, login_destination)
        self.store = ResourceStore(
            gateway,
            self.guard,
            load_error=load_error,
            discard_stale_responses=discard_stale_responses,
        )
        self.editor = EditSession()
        self.search_term = ""

    @classmethod
    def from_config(
        cls,
        config: RosterConfig,
        session: SessionContext,
        navigator: Navigator,
        prompter: Prompter,
    ) -> RosterController:
        gateway = StudentGateway(config.api.students_url, timeout=config.api.timeout)
        return cls(
            session,
            gateway,
            navigator,
            prompter,
            login_destination=config.login_destination,
            load_error=(
                "Failed to load students. "
                f"Make sure the backend is running at {config.api.base_url}."
            ),
            discard_stale_responses=config.discard_stale_responses,
        )

    async def aclose(self) -> None:
        await self.gateway.aclose()

    async def on_render(self) -> bool:
        """Run the session guard for one render cycle.

        Returns:
            Whether the roster view may be rendered.
        """
        state = self.guard.evaluate()
        if state is GuardState.ENTERED:
            await self.store.refresh(self.session)
        return state is not GuardState.DENIED

    @property
    def students(self) -> list[StudentRecord]:
        return self.store.students

    @property
    def visible_students(self) -> list[StudentRecord]:
        """The fetched list narrowed by the current search term."""
        return filter_students(self.store.students, self.search_term)

    @property
    def total_visible(self) -> int:
        return len(self.visible_students)

    def set_search(self, term: str) -> None:
        self.search_term = term

    def open_add(self) -> None:
        self.editor.open_create()

    def open_edit(self, record: StudentRecord) -> None:
        self.editor.open_edit(record)

    def cancel(self) -> None:
        self.editor.cancel()

    async def submit(self) -> bool:
        """Send the open dialog's draft as a create or an update.

        Returns:
            True when the call succeeded and the dialog was closed.
        """
        try:
            submission = self.editor.submit()
        except DraftValidationError as e:
            logger.debug("Submit rejected: %s", e)
            await self.prompter.alert(FILL_ALL_FIELDS)
            return False

        student_id = submission.student_id
        if student_id is not None:
            ok = await self._mutate(
                "update",
                lambda: self.gateway.update(self.session, student_id, submission.draft),
            )
        else:
            ok = await self._mutate(
                "create", lambda: self.gateway.create(self.session, submission.draft)
            )
        if ok:
            self.editor.close()
        return ok

    async def delete(self, student_id: int) -> bool:
        """Delete a student after explicit confirmation.

        Returns:
            True when the student was deleted.
        """
        if not self.session.token:
            logger.debug("Delete skipped: no session token")
            return False
        if not await self.prompter.confirm(CONFIRM_DELETE):
            logger.debug("Delete of student %d not confirmed", student_id)
            return False
        return await self._mutate(
            "delete", lambda: self.gateway.delete(self.session, student_id)
        )

    def logout(self) -> None:
        """End the session at the user's request and go to login."""
        self.session.logout()
        self.guard.evaluate()

    async def _mutate(self, action: str, call: Callable[[], Awaitable[None]]) -> bool:
        if not self.session.token:
            logger.debug("%s skipped: no session token", action.capitalize())
            return False
        try:
            await call()
        except AuthorizationDeniedError:
            self.guard.teardown()
            return False
        except GatewayError as e:
            logger.error("Failed to %s student: %s", action, e)
            self.store.report_error(f"Failed to {action} student")
            return False
        await self.store.refresh(self.session)
        return True
