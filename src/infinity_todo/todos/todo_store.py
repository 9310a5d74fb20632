# todos/todo_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from typing import Any

from ..storage.database import Database
from . import tree
from .models import Todo

logger = logging.getLogger(__name__)


def row_to_todo(row: sqlite3.Row) -> Todo:
    return Todo(
        id=int(row["id"]),
        parent_id=int(row["parent_id"]) if row["parent_id"] is not None else None,
        title=str(row["title"]),
        completed=bool(row["completed"] or 0),
        sort_order=int(row["sort_order"] or 0),
        description=str(row["description"] or ""),
        priority=int(row["priority"] or 0),
        due_date=row["due_date"],
    )


class TodoTransaction:
    """
    Row-level primitives bound to one open transaction.

    Obtained from TodoStore.transaction(); never outlives the `with` block.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # ---- reads ----

    def exists(self, todo_id: int) -> bool:
        row = self._conn.execute("SELECT 1 FROM todos WHERE id = ?", (int(todo_id),)).fetchone()
        return row is not None

    def is_descendant(self, ancestor_id: int, candidate_id: int) -> bool:
        return tree.is_descendant(self._conn, ancestor_id, candidate_id)

    # ---- writes ----

    def insert(
        self,
        *,
        title: str,
        parent_id: int | None,
        description: str,
        priority: int,
        due_date: str | None,
    ) -> int:
        cur = self._conn.execute(
            """
            INSERT INTO todos(title, parent_id, completed, sort_order, description, priority, due_date)
            VALUES (?, ?, 0, 0, ?, ?, ?)
            """,
            (title, parent_id, description, priority, due_date),
        )
        rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for todos insert")
        return int(rowid)

    def update_fields(self, todo_id: int, columns: list[tuple[str, Any]]) -> int:
        if not columns:
            return 0
        sets = ", ".join(f"{name} = ?" for name, _ in columns)
        params = [value for _, value in columns]
        params.append(int(todo_id))
        cur = self._conn.execute(f"UPDATE todos SET {sets} WHERE id = ?", params)
        return cur.rowcount

    def set_completed_below(self, todo_id: int, completed: bool) -> int:
        return tree.set_completed_below(self._conn, todo_id, completed)

    def move(self, todo_id: int, parent_id: int | None, sort_order: int) -> int:
        cur = self._conn.execute(
            "UPDATE todos SET parent_id = ?, sort_order = ? WHERE id = ?",
            (parent_id, int(sort_order), int(todo_id)),
        )
        return cur.rowcount

    def delete_subtree(self, todo_id: int) -> int:
        return tree.delete_subtree(self._conn, todo_id)


class TodoStore:
    """SQLite todo store (rows of the `todos` table) on top of a shared Database."""

    def __init__(self, db: Database) -> None:
        self._db = db
        try:
            total = self.count_todos()
        except Exception:
            total = -1
        logger.info("TodoStore ready db=%s total=%s", db.path, total)

    @property
    def db(self) -> Database:
        return self._db

    @contextlib.contextmanager
    def transaction(self) -> Iterator[TodoTransaction]:
        with self._db.transaction() as conn:
            yield TodoTransaction(conn)

    # ---- read-only API ----

    def count_todos(self) -> int:
        with self._db.reading() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
            return int(n)

    def list_todos(self) -> list[Todo]:
        """Every todo ordered by (sort_order, id), the order views render siblings in."""
        with self._db.reading() as conn:
            rows = conn.execute("SELECT * FROM todos ORDER BY sort_order ASC, id ASC").fetchall()
            return [row_to_todo(r) for r in rows]

    def get_todo(self, todo_id: int) -> Todo | None:
        with self._db.reading() as conn:
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (int(todo_id),)).fetchone()
            return row_to_todo(row) if row else None

    def list_children(self, parent_id: int | None) -> list[Todo]:
        with self._db.reading() as conn:
            return [row_to_todo(r) for r in tree.child_rows(conn, parent_id)]
