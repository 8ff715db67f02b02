"""Roster Controller - User actions over the session-gated student list."""

from roster.controller.controller import (
    CONFIRM_DELETE,
    FILL_ALL_FIELDS,
    Prompter,
    RosterController,
)

__all__ = ["CONFIRM_DELETE", "FILL_ALL_FIELDS", "Prompter", "RosterController"]
