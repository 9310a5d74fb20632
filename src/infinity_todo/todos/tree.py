# todos/tree.py

"""
Tree queries over the parent_id links of the `todos` table.

Nothing is cached: every call walks the live rows with a recursive CTE, so
passing the connection of an open transaction gives an answer that matches
exactly what that transaction is about to write.

The cascade writes (set_completed_below, delete_subtree) run the CTE inside
the UPDATE/DELETE itself, so subtree size is not bounded by SQLite's limit on
bound variables.
"""

from __future__ import annotations

import sqlite3

# UNION (not UNION ALL) de-duplicates and stops a corrupted cyclic table from
# recursing forever. Binds: the root id.
_DESCENDANTS_CTE = """
    WITH RECURSIVE descendants(id) AS (
        SELECT id FROM todos WHERE parent_id = ?
        UNION
        SELECT t.id FROM todos t
        INNER JOIN descendants d ON t.parent_id = d.id
    )
"""


def descendant_ids(conn: sqlite3.Connection, todo_id: int) -> list[int]:
    """All transitive descendants of `todo_id` (the node itself excluded)."""
    cur = conn.execute(
        _DESCENDANTS_CTE + "SELECT id FROM descendants WHERE id != ? ORDER BY id",
        (int(todo_id), int(todo_id)),
    )
    return [int(row[0]) for row in cur.fetchall()]


def subtree_ids(conn: sqlite3.Connection, todo_id: int) -> list[int]:
    return [int(todo_id), *descendant_ids(conn, todo_id)]


def count_subtree(conn: sqlite3.Connection, todo_id: int) -> int:
    """Number of rows in the subtree rooted at `todo_id` (0 if it does not exist)."""
    (n,) = conn.execute(
        _DESCENDANTS_CTE
        + "SELECT COUNT(*) FROM todos WHERE id = ? OR id IN (SELECT id FROM descendants)",
        (int(todo_id), int(todo_id)),
    ).fetchone()
    return int(n)


def is_descendant(conn: sqlite3.Connection, ancestor_id: int, candidate_id: int) -> bool:
    """True if `candidate_id` lies strictly below `ancestor_id`."""
    if int(ancestor_id) == int(candidate_id):
        return False
    row = conn.execute(
        _DESCENDANTS_CTE + "SELECT 1 FROM descendants WHERE id = ? LIMIT 1",
        (int(ancestor_id), int(candidate_id)),
    ).fetchone()
    return row is not None


def set_completed_below(conn: sqlite3.Connection, todo_id: int, completed: bool) -> int:
    """Write `completed` on every descendant of `todo_id`; returns rows touched."""
    cur = conn.execute(
        _DESCENDANTS_CTE
        + "UPDATE todos SET completed = ? WHERE id != ? AND id IN (SELECT id FROM descendants)",
        (int(todo_id), 1 if completed else 0, int(todo_id)),
    )
    return cur.rowcount


def delete_subtree(conn: sqlite3.Connection, todo_id: int) -> int:
    """Delete `todo_id` and all its descendants; returns how many rows went away."""
    # rowcount skips rows removed by the FK cascade, so count first.
    removed = count_subtree(conn, todo_id)
    conn.execute(
        _DESCENDANTS_CTE
        + "DELETE FROM todos WHERE id = ? OR id IN (SELECT id FROM descendants)",
        (int(todo_id), int(todo_id)),
    )
    return removed


def child_rows(conn: sqlite3.Connection, parent_id: int | None) -> list[sqlite3.Row]:
    """Direct children of `parent_id` (None = roots) in sibling order."""
    if parent_id is None:
        cur = conn.execute(
            "SELECT * FROM todos WHERE parent_id IS NULL ORDER BY sort_order ASC, id ASC"
        )
    else:
        cur = conn.execute(
            "SELECT * FROM todos WHERE parent_id = ? ORDER BY sort_order ASC, id ASC",
            (int(parent_id),),
        )
    return cur.fetchall()
