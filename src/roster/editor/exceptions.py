"""Custom exceptions for the edit session."""

from __future__ import annotations


class EditSessionError(Exception):
    """Base exception for edit session errors."""


class DialogStateError(EditSessionError):
    """Action not allowed in the current dialog state."""


class DraftValidationError(EditSessionError):
    """One or more required fields are empty."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing
