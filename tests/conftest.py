# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from infinity_todo.core.state import AppState
from infinity_todo.storage.database import Database
from infinity_todo.storage.settings_store import SettingsStore
from infinity_todo.todos.todo_store import TodoStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any .env file.
    """
    return SimpleNamespace(
        app_name="Infinity Todo (test)",
        data_dir=tmp_path,
        db_path=tmp_path / "todo.db",
        db_timeout=5.0,
        outline_indent=2,
    )


@pytest.fixture()
def db(settings: SimpleNamespace) -> Database:
    return Database(settings.db_path, timeout=settings.db_timeout)


@pytest.fixture()
def store(db: Database) -> TodoStore:
    return TodoStore(db)


@pytest.fixture()
def prefs(db: Database) -> SettingsStore:
    return SettingsStore(db)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TodoStore, prefs: SettingsStore) -> AppState:
    """
    AppState wired with the real SQLite stores: their correctness is part of
    what the command tests exercise.
    """
    return AppState(settings=settings, todos=store, prefs=prefs)
