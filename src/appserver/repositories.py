from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .db import Database
from .errors import NotFoundError
from .models import TaskEntity, TaskHeaderEntity, TodoEntity, TodoFilter

logger = logging.getLogger(__name__)


# One fixed query per filter variant.
_TODO_FILTER_QUERIES: Dict[TodoFilter, str] = {
    TodoFilter.ALL: "SELECT id, name, done FROM todos ORDER BY id",
    TodoFilter.ACTIVE: "SELECT id, name, done FROM todos WHERE done = 0 ORDER BY id",
    TodoFilter.COMPLETED: "SELECT id, name, done FROM todos WHERE done = 1 ORDER BY id",
}

_SELECT_TODO = "SELECT id, name, done FROM todos WHERE id = ?"
_SELECT_TASK = "SELECT id, name, description, created, due, done FROM tasks WHERE id = ?"


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _to_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_dt(value: datetime) -> str:
    return _to_utc(value).isoformat()


def _parse_dt(value: str) -> datetime:
    return _to_utc(datetime.fromisoformat(value))


def _row_to_todo(row: sqlite3.Row) -> TodoEntity:
    return {
        "id": int(row["id"]),
        "name": str(row["name"]),
        "done": bool(row["done"]),
    }


def _row_to_task(row: sqlite3.Row) -> TaskEntity:
    return {
        "id": int(row["id"]),
        "name": str(row["name"]),
        "description": row["description"] if row["description"] is not None else "",
        "created": _parse_dt(row["created"]),
        "due": _parse_dt(row["due"]),
        "done": bool(row["done"]),
    }


# PUBLIC_INTERFACE
class TodoRepository:
    """
    Row access for the todos table.

    Partial updates and toggles read the current row and write the result in a
    single `BEGIN IMMEDIATE` transaction, so concurrent writers of the same row
    are serialised instead of losing updates.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def _fetch(self, conn: sqlite3.Connection, todo_id: int) -> TodoEntity:
        row = conn.execute(_SELECT_TODO, (todo_id,)).fetchone()
        if row is None:
            raise NotFoundError("Todo not found", detail={"id": todo_id})
        return _row_to_todo(row)

    def select_by_id(self, todo_id: int) -> TodoEntity:
        """Return the todo with `todo_id` or raise NotFoundError."""
        with self._db.connection() as conn:
            return self._fetch(conn, todo_id)

    def select_all(self) -> List[TodoEntity]:
        return self.select_matching(TodoFilter.ALL)

    def select_filtered(self, done: Optional[bool]) -> List[TodoEntity]:
        """
        Return all todos when `done` is None, otherwise only those whose done flag
        equals `done`.
        """
        return self.select_matching(TodoFilter.from_done(done))

    def select_matching(self, todo_filter: TodoFilter) -> List[TodoEntity]:
        with self._db.connection() as conn:
            rows = conn.execute(_TODO_FILTER_QUERIES[todo_filter]).fetchall()
            return [_row_to_todo(r) for r in rows]

    def insert(self, name: str) -> int:
        """Insert a new todo with done = false and return its id."""
        with self._db.connection() as conn:
            cur = conn.execute("INSERT INTO todos (name, done) VALUES (?, 0)", (name,))
            new_id = int(cur.lastrowid)
        logger.debug("Inserted todo %s", new_id)
        return new_id

    def update_partial(
        self, todo_id: int, name: Optional[str] = None, done: Optional[bool] = None
    ) -> None:
        """
        Overwrite the supplied fields of a todo; fields left as None keep their
        stored value. Raises NotFoundError for an unknown id.
        """
        with self._db.transaction() as conn:
            current = self._fetch(conn, todo_id)
            conn.execute(
                "UPDATE todos SET name = ?, done = ? WHERE id = ?",
                (
                    name if name is not None else current["name"],
                    1 if (done if done is not None else current["done"]) else 0,
                    todo_id,
                ),
            )

    def toggle_done(self, todo_id: int) -> TodoEntity:
        """Flip the done flag of a todo and return the new state."""
        with self._db.transaction() as conn:
            todo = self._fetch(conn, todo_id)
            todo["done"] = not todo["done"]
            conn.execute(
                "UPDATE todos SET done = ? WHERE id = ?",
                (1 if todo["done"] else 0, todo_id),
            )
            return todo

    def delete(self, todo_id: int) -> None:
        """Delete a todo. Deleting an absent id is not an error."""
        with self._db.connection() as conn:
            cur = conn.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
            if cur.rowcount == 0:
                logger.debug("Delete of todo %s affected no rows", todo_id)


# PUBLIC_INTERFACE
class TaskRepository:
    """
    Row access for the tasks table and the tasktodos join table.

    Deleting a task leaves its tasktodos rows in place; the join in
    `select_linked_todos` skips links whose todo no longer exists, and task ids
    are never reused, so orphaned links stay unreachable.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def _fetch(self, conn: sqlite3.Connection, task_id: int) -> TaskEntity:
        row = conn.execute(_SELECT_TASK, (task_id,)).fetchone()
        if row is None:
            raise NotFoundError("Task not found", detail={"id": task_id})
        return _row_to_task(row)

    def select_by_id(self, task_id: int) -> TaskEntity:
        """Return the task row (without todos) or raise NotFoundError."""
        with self._db.connection() as conn:
            return self._fetch(conn, task_id)

    def select_headers(self) -> List[TaskHeaderEntity]:
        with self._db.connection() as conn:
            rows = conn.execute("SELECT id, name FROM tasks ORDER BY id").fetchall()
            return [{"id": int(r["id"]), "name": str(r["name"])} for r in rows]

    def insert(self, name: str, description: str, due: datetime, done: bool = False) -> int:
        """
        Insert a task and return its id. `created` is always stamped with the
        current UTC time.
        """
        with self._db.connection() as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks (name, description, created, due, done)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, description, _format_dt(utc_now()), _format_dt(due), 1 if done else 0),
            )
            new_id = int(cur.lastrowid)
        logger.debug("Inserted task %s", new_id)
        return new_id

    def update_partial(
        self,
        task_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        due: Optional[datetime] = None,
        done: Optional[bool] = None,
    ) -> None:
        """
        Overwrite the supplied fields of a task; None fields keep their stored
        value. `created` is never touched. Raises NotFoundError for an unknown id.
        """
        with self._db.transaction() as conn:
            current = self._fetch(conn, task_id)
            conn.execute(
                """
                UPDATE tasks
                SET name = ?, description = ?, due = ?, done = ?
                WHERE id = ?
                """,
                (
                    name if name is not None else current["name"],
                    description if description is not None else current["description"],
                    _format_dt(due if due is not None else current["due"]),
                    1 if (done if done is not None else current["done"]) else 0,
                    task_id,
                ),
            )

    def delete(self, task_id: int) -> int:
        """
        Delete a task row. Join rows are kept; the number of links left behind
        is returned.
        """
        with self._db.connection() as conn:
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            row = conn.execute(
                "SELECT COUNT(*) AS cnt FROM tasktodos WHERE task_id = ?", (task_id,)
            ).fetchone()
            return int(row["cnt"]) if row else 0

    def add_todo_link(self, task_id: int, todo_id: int) -> None:
        with self._db.connection() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO tasktodos (task_id, todo_id) VALUES (?, ?)",
                (task_id, todo_id),
            )

    def remove_todo_link(self, task_id: int, todo_id: int) -> None:
        with self._db.connection() as conn:
            conn.execute(
                "DELETE FROM tasktodos WHERE task_id = ? AND todo_id = ?",
                (task_id, todo_id),
            )

    def select_linked_todos(self, task_id: int) -> List[TodoEntity]:
        """Return the todos linked to `task_id`, skipping links to deleted todos."""
        with self._db.connection() as conn:
            rows = conn.execute(
                """
                SELECT t.id, t.name, t.done
                FROM todos t
                JOIN tasktodos tt ON tt.todo_id = t.id
                WHERE tt.task_id = ?
                ORDER BY t.id
                """,
                (task_id,),
            ).fetchall()
            return [_row_to_todo(r) for r in rows]


# PUBLIC_INTERFACE
class UserRepository:
    """Row access for the users table; only inserts are exposed."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def insert(self, name: str) -> int:
        with self._db.connection() as conn:
            cur = conn.execute("INSERT INTO users (name) VALUES (?)", (name,))
            return int(cur.lastrowid)
