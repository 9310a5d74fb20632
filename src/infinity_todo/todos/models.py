# todos/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from ..errors import InvalidValue


class _Unset:
    """Marker for "field not supplied" (None is a real value for parent_id/due_date)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

# Columns a partial update may touch, in the order they are written.
PATCH_FIELDS = (
    "title",
    "completed",
    "sort_order",
    "parent_id",
    "description",
    "priority",
    "due_date",
)


@dataclass(slots=True)
class Todo:
    id: int
    parent_id: int | None
    title: str

    completed: bool = False
    sort_order: int = 0

    description: str = ""
    priority: int = 0
    due_date: str | None = None


@dataclass(frozen=True, slots=True)
class TodoMove:
    """One entry of a bulk reorder: put `id` under `parent_id` at `sort_order`."""

    id: int
    parent_id: int | None
    sort_order: int


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True is not a valid sort_order or id.
    return isinstance(value, int) and not isinstance(value, bool)


def check_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise InvalidValue("title must be a non-empty string")
    return title.strip()


def check_int(name: str, value: Any) -> int:
    if not _is_int(value):
        raise InvalidValue(f"{name} must be an integer, got {value!r}")
    return int(value)


def check_optional_int(name: str, value: Any) -> int | None:
    if value is None:
        return None
    return check_int(name, value)


def check_optional_text(name: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidValue(f"{name} must be a string or null, got {value!r}")
    return value


def check_completed(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if _is_int(value) and value in (0, 1):
        return bool(value)
    raise InvalidValue(f"completed must be a boolean, got {value!r}")


@dataclass(frozen=True, slots=True)
class TodoPatch:
    """
    Partial update of one todo.

    Every recognized field has its own slot; UNSET means "leave untouched".
    `parent_id=None` and `due_date=None` are real values (move to root,
    clear the due date).
    """

    title: Any = UNSET
    completed: Any = UNSET
    sort_order: Any = UNSET
    parent_id: Any = UNSET
    description: Any = UNSET
    priority: Any = UNSET
    due_date: Any = UNSET

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TodoPatch:
        """Build a patch from a request body; unknown keys are dropped."""
        return cls(**{k: v for k, v in data.items() if k in PATCH_FIELDS})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is UNSET for f in fields(self))

    def validated(self) -> TodoPatch:
        """Return a copy with normalized values, raising InvalidValue on bad input."""
        return TodoPatch(
            title=UNSET if self.title is UNSET else check_title(self.title),
            completed=UNSET if self.completed is UNSET else check_completed(self.completed),
            sort_order=(
                UNSET if self.sort_order is UNSET else check_int("sort_order", self.sort_order)
            ),
            parent_id=(
                UNSET
                if self.parent_id is UNSET
                else check_optional_int("parent_id", self.parent_id)
            ),
            description=(
                UNSET
                if self.description is UNSET
                else check_optional_text("description", self.description) or ""
            ),
            priority=UNSET if self.priority is UNSET else check_int("priority", self.priority),
            due_date=(
                UNSET if self.due_date is UNSET else check_optional_text("due_date", self.due_date)
            ),
        )

    def columns(self) -> list[tuple[str, Any]]:
        """(column, db value) pairs for every supplied field."""
        out: list[tuple[str, Any]] = []
        for name in PATCH_FIELDS:
            value = getattr(self, name)
            if value is UNSET:
                continue
            if name == "completed":
                value = 1 if value else 0
            out.append((name, value))
        return out
