# src/infinity_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .ports import SettingsRepo, TodoRepo


@dataclass
class AppState:
    # Process configuration (config.Settings or a test stand-in).
    settings: Any

    todos: TodoRepo
    prefs: SettingsRepo
