# tests/test_database.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from infinity_todo.errors import InvalidReference, StorageFailure
from infinity_todo.storage.database import Database
from infinity_todo.todos.todo_store import TodoStore


def test_old_schema_is_migrated(tmp_path: Path) -> None:
    path = tmp_path / "legacy.db"
    conn = sqlite3.connect(str(path))
    conn.execute(
        "CREATE TABLE todos (id INTEGER PRIMARY KEY AUTOINCREMENT, parent_id INTEGER, "
        "title TEXT NOT NULL, completed INTEGER DEFAULT 0)"
    )
    conn.execute("INSERT INTO todos(title, completed) VALUES ('legacy', 1)")
    conn.commit()
    conn.close()

    store = TodoStore(Database(path))

    conn = sqlite3.connect(str(path))
    cols = {row[1] for row in conn.execute("PRAGMA table_info(todos)")}
    tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    conn.close()
    assert {"sort_order", "description", "priority", "due_date"} <= cols
    assert "settings" in tables

    (todo,) = store.list_todos()
    assert todo.title == "legacy"
    assert todo.completed is True
    assert todo.sort_order == 0
    assert todo.description == ""


def test_schema_setup_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "todo.db"
    Database(path)
    store = TodoStore(Database(path))
    assert store.count_todos() == 0


def test_transaction_rolls_back_on_error(db: Database) -> None:
    with pytest.raises(RuntimeError):
        with db.transaction() as conn:
            conn.execute("INSERT INTO todos(title) VALUES ('doomed')")
            raise RuntimeError("boom")

    with db.reading() as conn:
        (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
    assert n == 0


def test_sqlite_errors_are_wrapped(db: Database) -> None:
    with pytest.raises(StorageFailure) as exc_info:
        with db.transaction() as conn:
            conn.execute("INSERT INTO no_such_table VALUES (1)")
    assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
    assert exc_info.value.kind == "storage_failure"


def test_foreign_key_violation_is_invalid_reference(db: Database) -> None:
    with pytest.raises(InvalidReference):
        with db.transaction() as conn:
            conn.execute("INSERT INTO todos(title, parent_id) VALUES ('orphan', 777)")


def test_foreign_key_cascade_on_delete(db: Database) -> None:
    with db.transaction() as conn:
        parent = conn.execute("INSERT INTO todos(title) VALUES ('p')").lastrowid
        conn.execute("INSERT INTO todos(title, parent_id) VALUES ('c', ?)", (parent,))

    with db.transaction() as conn:
        conn.execute("DELETE FROM todos WHERE id = ?", (parent,))

    with db.reading() as conn:
        (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
    assert n == 0
