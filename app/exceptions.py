"""Store failures surfaced to ingestion and query callers."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for relational store failures."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Store operation failed: {operation}")


class StoreUnavailableError(StoreError):
    """The store could not be reached or the connection broke mid-operation."""


class StoreWriteRejectedError(StoreError):
    """The store refused a write (constraint or data error)."""
