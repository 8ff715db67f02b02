"""Roster - Session-gated client for a student roster API."""

__version__ = "0.1.0"
