# storage/database.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from ..errors import InvalidReference, StorageFailure, TodoError

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class Database:
    """
    SQLite database holding the `todos` and `settings` tables.

    The schema is migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - every transaction/read opens its own SQLite connection, except for
      ":memory:", where one connection is shared for the lifetime of the object
      (a fresh connection would see an empty database); call close() when done
    - writers take the write lock up front (BEGIN IMMEDIATE), so a read-then-write
      sequence inside one transaction sees a single snapshot
    """

    def __init__(self, db_path: str | Path = "todo.db", *, timeout: float = 30.0) -> None:
        self._timeout = float(timeout)
        self._shared: sqlite3.Connection | None = None
        self._in_memory = str(db_path) == MEMORY_PATH
        if self._in_memory:
            self._db_path = Path(MEMORY_PATH)
            self._shared = self._open()
        else:
            self._db_path = Path(db_path)
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.ensure_schema()
        logger.info("Database ready db=%s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    @property
    def in_memory(self) -> bool:
        return self._in_memory

    def close(self) -> None:
        """Close the shared in-memory connection (no-op for file databases)."""
        if self._shared is not None:
            self._shared.close()
            self._shared = None

    # ---- low-level helpers ----

    def _open(self) -> sqlite3.Connection:
        try:
            # isolation_level=None: we issue BEGIN/COMMIT ourselves.
            conn = sqlite3.connect(str(self._db_path), timeout=self._timeout, isolation_level=None)
        except sqlite3.Error as exc:
            raise StorageFailure(f"cannot open {self._db_path}: {exc}") from exc
        try:
            conn.row_factory = sqlite3.Row
            self._configure_conn(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageFailure(f"cannot configure {self._db_path}: {exc}") from exc
        return conn

    @contextlib.contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        if self._in_memory:
            if self._shared is None:
                raise StorageFailure("in-memory database is closed")
            yield self._shared
            return
        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        # Cascade-on-delete depends on this pragma; it is per connection.
        conn.execute("PRAGMA foreign_keys=ON")
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        One atomic unit of work.

        Commits when the block exits normally, rolls back on any exception.
        sqlite3 errors are re-raised as StorageFailure (or InvalidReference for
        a foreign-key violation); TodoError subclasses pass through unchanged.
        """
        with self._get_conn() as conn:
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.execute("COMMIT")
            except BaseException as exc:
                if conn.in_transaction:
                    try:
                        conn.execute("ROLLBACK")
                    except sqlite3.Error:
                        logger.exception("Rollback failed db=%s", self._db_path)
                if isinstance(exc, TodoError) or not isinstance(exc, sqlite3.Error):
                    raise
                if isinstance(exc, sqlite3.IntegrityError) and "FOREIGN KEY" in str(exc).upper():
                    raise InvalidReference(f"foreign key violation: {exc}") from exc
                raise StorageFailure(str(exc)) from exc

    @contextlib.contextmanager
    def reading(self) -> Iterator[sqlite3.Connection]:
        """Read-only access (autocommit; each statement sees a consistent snapshot)."""
        with self._get_conn() as conn:
            try:
                yield conn
            except sqlite3.Error as exc:
                raise StorageFailure(str(exc)) from exc

    def ensure_schema(self) -> None:
        with self.transaction() as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    parent_id INTEGER,
                    title TEXT NOT NULL,
                    completed INTEGER DEFAULT 0,
                    sort_order INTEGER DEFAULT 0,
                    description TEXT DEFAULT '',
                    priority INTEGER DEFAULT 0,
                    due_date TEXT,
                    FOREIGN KEY (parent_id) REFERENCES todos(id) ON DELETE CASCADE
                )
                """
            )

            # Migrations (safe): older databases predate these columns.
            cur.execute("PRAGMA table_info(todos)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
                logger.info("Database migration: added column todos.%s", name)

            add_col("sort_order", "INTEGER DEFAULT 0")
            add_col("description", "TEXT DEFAULT ''")
            add_col("priority", "INTEGER DEFAULT 0")
            add_col("due_date", "TEXT")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_todos_parent_order "
                "ON todos(parent_id, sort_order, id)"
            )

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
                """
            )
