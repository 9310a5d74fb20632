# src/infinity_todo/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..errors import TodoError
from ..todos import todo_api
from ..todos.models import TodoPatch
from ..todos.render import render_outline

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad command arguments; the message is the usage line shown to the user."""


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Domain errors are rendered as "<kind>: <message>"; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except UsageError as e:
            return f"Usage: {e}"
        except TodoError as e:
            logger.info("Command /%s failed: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _int_arg(raw: str, usage: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise UsageError(usage) from None


def _parent_arg(raw: str, usage: str) -> int | None:
    if raw.lower() in ("root", "-", "none"):
        return None
    return _int_arg(raw, usage)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    total = state.todos.count_todos()
    done = sum(1 for t in state.todos.list_todos() if t.completed)
    db_path = getattr(state.settings, "db_path", "?")
    return f"Status:\n  Database: {db_path}\n  Todos: {total} ({done} done)"


def cmd_list(state: AppState, args: list[str]) -> str:
    todos = todo_api.list_todos(state.todos)
    if not todos:
        return "No todos yet. Type a title to add one."
    indent = int(getattr(state.settings, "outline_indent", 2))
    return render_outline(todos, indent=indent)


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        raise UsageError("/add <title>")
    todo = todo_api.create_todo(state.todos, " ".join(args))
    return f"Added #{todo.id} {todo.title}"


def cmd_sub(state: AppState, args: list[str]) -> str:
    usage = "/sub <parent_id> <title>"
    if len(args) < 2:
        raise UsageError(usage)
    parent_id = _int_arg(args[0], usage)
    todo = todo_api.create_todo(state.todos, " ".join(args[1:]), parent_id=parent_id)
    return f"Added #{todo.id} {todo.title} under #{parent_id}"


def _set_completed(state: AppState, args: list[str], completed: bool, usage: str) -> str:
    if len(args) != 1:
        raise UsageError(usage)
    todo_id = _int_arg(args[0], usage)
    todo_api.update_todo(state.todos, todo_id, TodoPatch(completed=completed))
    return f"#{todo_id} and its subtasks marked {'done' if completed else 'not done'}."


def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_completed(state, args, True, "/done <id>")


def cmd_undone(state: AppState, args: list[str]) -> str:
    return _set_completed(state, args, False, "/undone <id>")


# /edit field name -> TodoPatch field
_EDIT_FIELDS = {
    "title": "title",
    "description": "description",
    "desc": "description",
    "priority": "priority",
    "due": "due_date",
    "order": "sort_order",
}


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title <text>
    /edit <id> desc <text>
    /edit <id> priority <n>
    /edit <id> due <date|->
    /edit <id> order <n>
    """
    usage = "/edit <id> title|desc|priority|due|order <value>"
    if len(args) < 3:
        raise UsageError(usage)
    todo_id = _int_arg(args[0], usage)
    field = _EDIT_FIELDS.get(args[1].lower())
    if field is None:
        raise UsageError(usage)

    raw = " ".join(args[2:])
    value: object = raw
    if field in ("priority", "sort_order"):
        value = _int_arg(raw, usage)
    elif field == "due_date" and raw == "-":
        value = None

    todo_api.update_todo(state.todos, todo_id, {field: value})
    return f"#{todo_id} updated."


def cmd_move(state: AppState, args: list[str]) -> str:
    usage = "/move <id> <parent_id|root> <order>"
    if len(args) != 3:
        raise UsageError(usage)
    todo_id = _int_arg(args[0], usage)
    parent_id = _parent_arg(args[1], usage)
    order = _int_arg(args[2], usage)
    todo_api.reorder_todo(state.todos, todo_id, parent_id, order)
    where = "root" if parent_id is None else f"#{parent_id}"
    return f"#{todo_id} moved under {where} at order {order}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    usage = "/rm <id>"
    if len(args) != 1:
        raise UsageError(usage)
    todo_id = _int_arg(args[0], usage)
    removed = todo_api.delete_todo(state.todos, todo_id)
    return f"Deleted #{todo_id} ({removed} todo{'s' if removed != 1 else ''} removed)."


def cmd_settings(state: AppState, args: list[str]) -> str:
    values = state.prefs.get_settings()
    if not values:
        return "No settings stored."
    lines = ["Settings:"]
    for key in sorted(values):
        lines.append(f"  {key} = {values[key]}")
    return "\n".join(lines)


def cmd_set(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        raise UsageError("/set <key> <value>")
    state.prefs.save_setting(args[0], " ".join(args[1:]))
    return f"Saved {args[0]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database path and todo counts.")
registry.register("list", cmd_list, help_text="Show the todo outline.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a root todo: /add <title>.")
registry.register("sub", cmd_sub, help_text="Add a subtask: /sub <parent_id> <title>.")
registry.register("done", cmd_done, help_text="Complete a todo and its subtasks: /done <id>.")
registry.register("undone", cmd_undone, help_text="Reopen a todo and its subtasks: /undone <id>.")
registry.register(
    "edit", cmd_edit, help_text="Edit one field: /edit <id> title|desc|priority|due|order <value>."
)
registry.register(
    "move", cmd_move, help_text="Reparent/reorder: /move <id> <parent_id|root> <order>."
)
registry.register("rm", cmd_rm, help_text="Delete a todo and its subtasks: /rm <id>.", aliases=["del"])
registry.register("settings", cmd_settings, help_text="Show stored preferences.")
registry.register("set", cmd_set, help_text="Store a preference: /set <key> <value>.")
