# todos/todo_api.py

"""
Todo mutation engine.

Every function takes the store explicitly and runs as one transaction:
validation, tree lookups and writes either all commit or all roll back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.ports import TodoRepo, TodoTx
from ..errors import InvalidReference, NotFound
from .models import (
    UNSET,
    Todo,
    TodoMove,
    TodoPatch,
    check_int,
    check_optional_int,
    check_optional_text,
    check_title,
)

logger = logging.getLogger(__name__)


def _require(tx: TodoTx, todo_id: int) -> None:
    if not tx.exists(todo_id):
        raise NotFound(f"todo {todo_id} does not exist")


def _check_new_parent(tx: TodoTx, todo_id: int, parent_id: int | None) -> None:
    """Reject a parent that is missing or that would close a cycle."""
    if parent_id is None:
        return
    if parent_id == todo_id:
        raise InvalidReference(f"todo {todo_id} cannot be its own parent")
    if not tx.exists(parent_id):
        raise InvalidReference(f"parent todo {parent_id} does not exist")
    if tx.is_descendant(todo_id, parent_id):
        raise InvalidReference(
            f"todo {parent_id} is a descendant of {todo_id}; moving would create a cycle"
        )


def list_todos(store: TodoRepo) -> list[Todo]:
    return store.list_todos()


def get_todo(store: TodoRepo, todo_id: int) -> Todo:
    todo = store.get_todo(check_int("id", todo_id))
    if todo is None:
        raise NotFound(f"todo {todo_id} does not exist")
    return todo


def list_children(store: TodoRepo, parent_id: int | None) -> list[Todo]:
    return store.list_children(check_optional_int("parent_id", parent_id))


def create_todo(
    store: TodoRepo,
    title: str,
    parent_id: int | None = None,
    description: str | None = "",
    priority: int | None = 0,
    due_date: str | None = None,
) -> Todo:
    """
    Insert a new todo (completed=False, sort_order=0) and return it.

    Callers place it among its siblings afterwards with reorder_todo().
    """
    title = check_title(title)
    parent_id = check_optional_int("parent_id", parent_id)
    description = check_optional_text("description", description) or ""
    priority = 0 if priority is None else check_int("priority", priority)
    due_date = check_optional_text("due_date", due_date)

    with store.transaction() as tx:
        if parent_id is not None and not tx.exists(parent_id):
            raise InvalidReference(f"parent todo {parent_id} does not exist")
        todo_id = tx.insert(
            title=title,
            parent_id=parent_id,
            description=description,
            priority=priority,
            due_date=due_date,
        )

    logger.debug("Todo created id=%s parent_id=%s", todo_id, parent_id)
    return Todo(
        id=todo_id,
        parent_id=parent_id,
        title=title,
        description=description,
        priority=priority,
        due_date=due_date,
    )


def update_todo(store: TodoRepo, todo_id: int, changes: TodoPatch | Mapping[str, Any]) -> None:
    """
    Apply a partial update.

    Only supplied fields are written. A supplied `completed` value is pushed
    down to every descendant of the target in the same transaction, whether
    it marks the subtree done or not done.
    """
    todo_id = check_int("id", todo_id)
    patch = changes if isinstance(changes, TodoPatch) else TodoPatch.from_mapping(changes)
    patch = patch.validated()

    with store.transaction() as tx:
        _require(tx, todo_id)
        if patch.is_empty():
            return

        if patch.parent_id is not UNSET:
            _check_new_parent(tx, todo_id, patch.parent_id)

        columns = patch.columns()
        tx.update_fields(todo_id, columns)
        cascade = 0
        if patch.completed is not UNSET:
            # A reparent never changes which rows lie below the target.
            cascade = tx.set_completed_below(todo_id, patch.completed)

    logger.debug(
        "Todo updated id=%s fields=%s cascade=%s",
        todo_id,
        [name for name, _ in columns],
        cascade,
    )


def reorder_todo(
    store: TodoRepo,
    todo_id: int,
    new_parent_id: int | None,
    new_sort_order: int,
) -> None:
    """
    Move a todo under `new_parent_id` (None = root) at `new_sort_order`.

    Siblings are not renumbered. Siblings sort by (sort_order, id), so the
    caller picks an order value between the two neighbours it wants to land
    between, or renumbers the siblings itself through reorder_many().
    """
    move = TodoMove(id=todo_id, parent_id=new_parent_id, sort_order=new_sort_order)
    reorder_many(store, [move])


def reorder_many(store: TodoRepo, moves: Iterable[TodoMove | Mapping[str, Any]]) -> None:
    """Apply several moves atomically; one bad move rolls back all of them."""
    checked: list[TodoMove] = []
    for m in moves:
        if isinstance(m, Mapping):
            m = TodoMove(
                id=m.get("id"),
                parent_id=m.get("parent_id"),
                sort_order=m.get("sort_order", 0),
            )
        checked.append(
            TodoMove(
                id=check_int("id", m.id),
                parent_id=check_optional_int("parent_id", m.parent_id),
                sort_order=check_int("sort_order", m.sort_order),
            )
        )
    if not checked:
        return

    with store.transaction() as tx:
        for move in checked:
            _require(tx, move.id)
            # Validated against the tree as already changed by earlier moves.
            _check_new_parent(tx, move.id, move.parent_id)
            tx.move(move.id, move.parent_id, move.sort_order)

    logger.debug("Todos reordered n=%s", len(checked))


def delete_todo(store: TodoRepo, todo_id: int) -> int:
    """Delete a todo with its whole subtree; returns how many rows went away."""
    todo_id = check_int("id", todo_id)
    with store.transaction() as tx:
        _require(tx, todo_id)
        # Explicit subtree delete: tables created before the foreign key
        # existed have no ON DELETE CASCADE to rely on.
        removed = tx.delete_subtree(todo_id)

    logger.debug("Todo deleted id=%s removed=%s", todo_id, removed)
    return removed
