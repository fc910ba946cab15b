"""Append-only JSON-lines journal of ledger events."""

from journal.writer import JournalWriter

__all__ = ["JournalWriter"]
