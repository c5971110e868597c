from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Generator, List, Tuple

from .errors import StoreError

logger = logging.getLogger(__name__)


# Creation order matters: tasktodos references todos and tasks.
SCHEMA: List[Tuple[str, str]] = [
    (
        "users",
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL
        )
        """,
    ),
    (
        "todos",
        """
        CREATE TABLE IF NOT EXISTS todos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            done BOOLEAN NOT NULL DEFAULT 0
        )
        """,
    ),
    (
        "tasks",
        """
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            created TEXT NOT NULL,
            due TEXT NOT NULL,
            done BOOLEAN NOT NULL DEFAULT 0
        )
        """,
    ),
    (
        "tags",
        """
        CREATE TABLE IF NOT EXISTS tags (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT,
            color TEXT
        )
        """,
    ),
    (
        "tasktodos",
        """
        CREATE TABLE IF NOT EXISTS tasktodos (
            task_id INTEGER NOT NULL,
            todo_id INTEGER NOT NULL,
            FOREIGN KEY (task_id) REFERENCES tasks(id),
            FOREIGN KEY (todo_id) REFERENCES todos(id),
            PRIMARY KEY (task_id, todo_id)
        )
        """,
    ),
]


# PUBLIC_INTERFACE
class Database:
    """
    Handle to the SQLite store shared by every repository and service.

    Each operation opens its own connection; at most `max_connections` are open
    at the same time; further callers block until a slot frees up. Any
    `sqlite3.Error` raised while a connection is in use is re-raised as
    `StoreError` after the pending transaction is rolled back.
    """

    def __init__(self, path: str, max_connections: int = 5, timeout: float = 5.0) -> None:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self._path = path
        self._timeout = timeout
        self._slots = threading.BoundedSemaphore(max_connections)

    @property
    def path(self) -> str:
        return self._path

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Yield a connection that commits on success and rolls back on any error.
        """
        with self._slots:
            try:
                conn = sqlite3.connect(self._path, timeout=self._timeout)
            except sqlite3.Error as e:
                raise StoreError(f"Could not open database {self._path}: {e}") from e
            conn.row_factory = sqlite3.Row
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(f"Store operation failed: {e}") from e
            except BaseException:
                conn.rollback()
                raise
            finally:
                conn.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Yield a connection inside a `BEGIN IMMEDIATE` transaction.

        The write lock is taken before the first read, so a read-modify-write
        sequence in the block cannot interleave with another writer.
        """
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            yield conn

    def vacuum_into(self, target: str) -> None:
        """Write a compacted copy of the database to `target`, which must not exist yet."""
        with self.connection() as conn:
            conn.execute("VACUUM INTO ?", (target,))


# PUBLIC_INTERFACE
def init_schema(db: Database) -> None:
    """
    Create users, todos, tasks, tags and tasktodos if they are missing.

    Idempotent. The first failing statement raises StoreError and the remaining
    tables are not attempted.
    """
    with db.connection() as conn:
        for table, ddl in SCHEMA:
            conn.execute(ddl)
            logger.debug("Ensured table %s", table)
    logger.info("Schema ready at %s", db.path)
