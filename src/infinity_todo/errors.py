# src/infinity_todo/errors.py

"""
Error taxonomy shared by the stores and the mutation engine.

Callers catch TodoError and read `.kind` for a stable machine-readable name.
Raw sqlite3 errors never leave the storage layer on their own: they are
wrapped into StorageFailure (the original exception stays on __cause__).
"""

from __future__ import annotations


class TodoError(Exception):
    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class NotFound(TodoError):
    """Referenced todo id does not exist."""

    kind = "not_found"


class InvalidReference(TodoError):
    """parent_id is dangling, or would turn the forest into a cycle."""

    kind = "invalid_reference"


class InvalidValue(TodoError):
    """Empty title, empty settings key or a field of the wrong type."""

    kind = "invalid_value"


class StorageFailure(TodoError):
    kind = "storage_failure"
