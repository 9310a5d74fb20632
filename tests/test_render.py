# tests/test_render.py

from __future__ import annotations

from infinity_todo.todos.models import Todo
from infinity_todo.todos.render import group_children, render_outline


def test_outline_follows_sibling_order() -> None:
    todos = [
        Todo(id=1, parent_id=None, title="root", sort_order=1),
        Todo(id=2, parent_id=1, title="second", sort_order=5),
        Todo(id=3, parent_id=1, title="first", sort_order=0, completed=True),
        Todo(id=4, parent_id=None, title="top", sort_order=0, priority=2, due_date="2026-10-20"),
        Todo(id=5, parent_id=3, title="deep"),
    ]
    assert render_outline(todos, indent=4) == "\n".join(
        [
            "[ ] #4 top (p2, due 2026-10-20)",
            "[ ] #1 root",
            "    [x] #3 first",
            "        [ ] #5 deep",
            "    [ ] #2 second",
        ]
    )


def test_orphans_are_shown_as_roots() -> None:
    todos = [Todo(id=7, parent_id=99, title="lost")]
    assert group_children(todos) == {None: todos}
    assert render_outline(todos) == "[ ] #7 lost"
