# src/infinity_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the front ends.

Commands and connectors depend on Protocols instead of concrete stores, so a
fake can stand in for SQLite in tests.
"""

from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any, Protocol

from ..todos.models import Todo


class TodoTx(Protocol):
    def exists(self, todo_id: int) -> bool: ...
    def is_descendant(self, ancestor_id: int, candidate_id: int) -> bool: ...

    def insert(
            self,
            *,
            title: str,
            parent_id: int | None,
            description: str,
            priority: int,
            due_date: str | None,
    ) -> int: ...

    def update_fields(self, todo_id: int, columns: list[tuple[str, Any]]) -> int: ...
    def set_completed_below(self, todo_id: int, completed: bool) -> int: ...
    def move(self, todo_id: int, parent_id: int | None, sort_order: int) -> int: ...
    def delete_subtree(self, todo_id: int) -> int: ...


class TodoRepo(Protocol):
    def transaction(self) -> AbstractContextManager[TodoTx]: ...
    def count_todos(self) -> int: ...
    def list_todos(self) -> list[Todo]: ...
    def get_todo(self, todo_id: int) -> Todo | None: ...
    def list_children(self, parent_id: int | None) -> list[Todo]: ...


class SettingsRepo(Protocol):
    def get_settings(self) -> dict[str, str]: ...
    def get_setting(self, key: str, default: str | None = None) -> str | None: ...
    def save_setting(self, key: str, value: Any) -> None: ...
    def save_settings(self, values: Mapping[str, Any]) -> None: ...
