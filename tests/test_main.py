# tests/test_main.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from infinity_todo import config
from infinity_todo.cli import main as cli_main
from infinity_todo.logging_setup import setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_writes_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs")
    logging.getLogger("infinity_todo.test").debug("hello %s", "file")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "todo.log"
    assert "hello file" in log_file.read_text("utf-8")


def test_main_creates_database_when_console_disabled(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logging
) -> None:
    monkeypatch.setenv("INFINITY_TODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("INFINITY_TODO_CONSOLE_ENABLED", "false")
    monkeypatch.delenv("INFINITY_TODO_DB_PATH", raising=False)
    monkeypatch.setattr(config, "_SETTINGS", None)
    monkeypatch.setattr(cli_main.signal, "signal", lambda *_args: None)

    assert cli_main.main() == 0
    assert (tmp_path / "todo.db").exists()
    assert (tmp_path / "todo.log").exists()
