# src/infinity_todo/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Turn one input line into a reply.

    Slash commands go through the registry; any other non-empty line is
    added as a new root todo.
    """
    line = line.strip()
    if not line:
        return None
    if not line.startswith("/"):
        line = f"/add {line}"
    return command_registry.handle(state, line)


def run_console_loop(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    should_stop: Callable[[], bool] = lambda: False,
) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "Infinity Todo"))
    _print_ts(f"[{app_name}] Type a title to add a todo. Use /help for commands, /exit to quit.\n")

    while not should_stop():
        try:
            user_input = read_line("todo> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, user_input)
        except KeyboardInterrupt:
            # The command's transaction has already rolled back.
            logger.info("Console KeyboardInterrupt during a command, exiting.")
            print()
            break
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
