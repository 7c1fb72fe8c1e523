"""Persistence layer for Racfella."""

from racfella.db.store import JournalStore

__all__ = ["JournalStore"]
