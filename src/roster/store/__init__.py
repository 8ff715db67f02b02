"""Resource Store - The authoritative student list and view flags."""

from roster.store.store import DEFAULT_LOAD_ERROR, ResourceStore

__all__ = ["DEFAULT_LOAD_ERROR", "ResourceStore"]
