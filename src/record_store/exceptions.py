"""Custom exception hierarchy for the record store."""

from __future__ import annotations


class StorageError(Exception):
    """A collection could not be read from or written to its backend."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
