"""EditSession - The create/edit dialog state machine."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from roster.editor.exceptions import DialogStateError, DraftValidationError
from roster.editor.models import DraftForm, EditState, Submission

if TYPE_CHECKING:
    from roster.gateway import StudentRecord

logger = logging.getLogger(__name__)


class EditSession:
    """Tracks whether a dialog is open, for which record, and its draft.

    Only one dialog can be open at a time. Closing, for whatever reason,
    always discards the draft and the edit target.
    """

    def __init__(self) -> None:
        self.state = EditState.CLOSED
        self.draft = DraftForm()
        self.target: StudentRecord | None = None

    @property
    def is_open(self) -> bool:
        return self.state is not EditState.CLOSED

    def open_create(self) -> None:
        """Open an empty dialog for a new student."""
        self._require_closed()
        self.state = EditState.OPEN_CREATE
        self.draft = DraftForm()
        self.target = None

    def open_edit(self, record: StudentRecord) -> None:
        """Open a dialog seeded with ``record``'s current values."""
        self._require_closed()
        self.state = EditState.OPEN_EDIT
        self.draft = DraftForm.from_record(record)
        self.target = record
        logger.debug("Editing student %d", record.id)

    def set_field(self, name: str, value: str) -> None:
        """Update one draft field."""
        if not self.is_open:
            raise DialogStateError("No dialog is open")
        if name not in DraftForm.field_names():
            raise ValueError(f"Unknown draft field: {name!r}")
        setattr(self.draft, name, value)

    def close(self) -> None:
        """Return to CLOSED, discarding the draft and target."""
        self.state = EditState.CLOSED
        self.draft = DraftForm()
        self.target = None

    cancel = close

    def submit(self) -> Submission:
        """Validate the draft and route it to create or update.

        The dialog stays open; the caller closes it once the call succeeds.

        Raises:
            DialogStateError: No dialog is open.
            DraftValidationError: A required field is empty.
        """
        if not self.is_open:
            raise DialogStateError("No dialog is open")
        missing = self.draft.missing_fields()
        if missing:
            raise DraftValidationError(missing)
        student_id = self.target.id if self.target is not None else None
        return Submission(draft=replace(self.draft), student_id=student_id)

    def _require_closed(self) -> None:
        if self.is_open:
            raise DialogStateError(f"A dialog is already open ({self.state})")
