# todos/render.py

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from .models import Todo


def group_children(todos: Iterable[Todo]) -> dict[int | None, list[Todo]]:
    """
    parent_id -> children in sibling order.

    Rows whose parent is not in `todos` are treated as roots so that nothing
    silently disappears from the outline.
    """
    items = list(todos)
    known = {t.id for t in items}
    groups: dict[int | None, list[Todo]] = defaultdict(list)
    for t in items:
        parent = t.parent_id if t.parent_id in known else None
        groups[parent].append(t)
    for siblings in groups.values():
        siblings.sort(key=lambda t: (t.sort_order, t.id))
    return dict(groups)


def _line(todo: Todo, depth: int, indent: int) -> str:
    box = "[x]" if todo.completed else "[ ]"
    extra = []
    if todo.priority:
        extra.append(f"p{todo.priority}")
    if todo.due_date:
        extra.append(f"due {todo.due_date}")
    tail = f" ({', '.join(extra)})" if extra else ""
    return f"{' ' * (depth * indent)}{box} #{todo.id} {todo.title}{tail}"


def render_outline(todos: Iterable[Todo], *, indent: int = 2) -> str:
    """Indented outline of the forest, depth-first in sibling order."""
    groups = group_children(todos)
    lines: list[str] = []
    seen: set[int] = set()

    def walk(parent_id: int | None, depth: int) -> None:
        for todo in groups.get(parent_id, []):
            if todo.id in seen:
                continue
            seen.add(todo.id)
            lines.append(_line(todo, depth, indent))
            walk(todo.id, depth + 1)

    walk(None, 0)
    return "\n".join(lines)
