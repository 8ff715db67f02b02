"""Data models for the edit session."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roster.gateway import StudentRecord


class EditState(StrEnum):
    """Dialog state."""

    CLOSED = "closed"
    OPEN_CREATE = "open_create"
    OPEN_EDIT = "open_edit"


@dataclass
class DraftForm:
    """Text-only working copy of a student's fields while a dialog is open."""

    name: str = ""
    email: str = ""
    age: str = ""

    @classmethod
    def from_record(cls, record: StudentRecord) -> DraftForm:
        return cls(name=record.name, email=record.email, age=str(record.age))

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def missing_fields(self) -> list[str]:
        """Names of the fields left empty."""
        return [name for name in self.field_names() if not getattr(self, name)]


@dataclass(frozen=True)
class Submission:
    """A validated draft and where it goes.

    Attributes:
        draft: Snapshot of the submitted form.
        student_id: Target of an update, or None for a create.
    """

    draft: DraftForm
    student_id: int | None = None
