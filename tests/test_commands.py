# tests/test_commands.py

from __future__ import annotations

from infinity_todo.cli.commands import CommandRegistry, registry
from infinity_todo.connectors import console_connector
from infinity_todo.connectors.console_connector import handle_line, run_console_loop
from infinity_todo.core.state import AppState
from infinity_todo.todos import todo_api


def test_command_registry_routes_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(state, "/a x y") == "a:x,y"
    assert reg.handle(state, "/ALPHA") == "a:"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_sub_done_and_list(state: AppState) -> None:
    assert registry.handle(state, "/add Plan trip") == "Added #1 Plan trip"
    assert registry.handle(state, "/sub 1 Book flights") == "Added #2 Book flights under #1"
    assert "marked done" in (registry.handle(state, "/done 1") or "")

    assert registry.handle(state, "/list") == (
        "[x] #1 Plan trip\n"
        "  [x] #2 Book flights"
    )


def test_plain_line_adds_root_todo(state: AppState) -> None:
    assert handle_line(state, "Buy milk") == "Added #1 Buy milk"
    assert handle_line(state, "   ") is None
    assert [t.title for t in todo_api.list_todos(state.todos)] == ["Buy milk"]


def test_domain_errors_are_rendered(state: AppState) -> None:
    assert (registry.handle(state, "/rm 99") or "").startswith("not_found:")
    assert (registry.handle(state, "/sub 99 child") or "").startswith("invalid_reference:")

    registry.handle(state, "/add parent")
    registry.handle(state, "/sub 1 child")
    assert (registry.handle(state, "/move 1 2 0") or "").startswith("invalid_reference:")


def test_usage_errors(state: AppState) -> None:
    assert (registry.handle(state, "/done") or "").startswith("Usage:")
    assert (registry.handle(state, "/done abc") or "").startswith("Usage:")
    assert (registry.handle(state, "/edit 1 colour red") or "").startswith("Usage:")


def test_edit_move_rm(state: AppState) -> None:
    registry.handle(state, "/add first")
    registry.handle(state, "/add second")
    registry.handle(state, "/edit 1 priority 3")
    registry.handle(state, "/edit 1 due 2026-11-02")
    registry.handle(state, "/edit 2 title Second item")

    first = todo_api.get_todo(state.todos, 1)
    assert (first.priority, first.due_date) == (3, "2026-11-02")
    assert todo_api.get_todo(state.todos, 2).title == "Second item"

    assert registry.handle(state, "/move 2 1 0") == "#2 moved under #1 at order 0."
    assert todo_api.get_todo(state.todos, 2).parent_id == 1
    registry.handle(state, "/move 2 root 7")
    assert todo_api.get_todo(state.todos, 2).parent_id is None

    assert registry.handle(state, "/rm 1") == "Deleted #1 (1 todo removed)."


def test_settings_commands(state: AppState) -> None:
    assert registry.handle(state, "/settings") == "No settings stored."
    assert registry.handle(state, "/set theme dark mode") == "Saved theme."
    assert registry.handle(state, "/settings") == "Settings:\n  theme = dark mode"


def test_console_loop_runs_until_exit(state: AppState, capsys) -> None:
    lines = iter(["Water plants", "/list", "/exit", "never read"])
    run_console_loop(state, read_line=lambda _prompt: next(lines))

    out = capsys.readouterr().out
    assert "Added #1 Water plants" in out
    assert "[ ] #1 Water plants" in out
    assert [t.title for t in todo_api.list_todos(state.todos)] == ["Water plants"]


def test_console_loop_stops_on_eof(state: AppState) -> None:
    def read_line(_prompt: str) -> str:
        raise EOFError

    run_console_loop(state, read_line=read_line)


def test_console_loop_stops_on_interrupt_inside_a_command(state: AppState, monkeypatch) -> None:
    lines = iter(["/list", "Water plants"])

    def interrupted(_state: AppState, _line: str) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(console_connector, "handle_line", interrupted)
    run_console_loop(state, read_line=lambda _prompt: next(lines))

    assert next(lines) == "Water plants"
    assert todo_api.list_todos(state.todos) == []
