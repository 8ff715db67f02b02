"""Edit Session - Create/edit dialog state and draft form."""

from roster.editor.exceptions import (
    DialogStateError,
    DraftValidationError,
    EditSessionError,
)
from roster.editor.models import DraftForm, EditState, Submission
from roster.editor.session import EditSession

__all__ = [
    "DialogStateError",
    "DraftForm",
    "DraftValidationError",
    "EditSession",
    "EditSessionError",
    "EditState",
    "Submission",
]
