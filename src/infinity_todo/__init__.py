"""Infinity Todo: a hierarchical todo list on SQLite."""

__version__ = "0.1.0"
