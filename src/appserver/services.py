from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .db import Database
from .errors import StoreError
from .models import TaskHeaderEntity, TaskModel, TodoEntity, TodoFilter, UserEntity
from .repositories import TaskRepository, TodoRepository, UserRepository, utc_now

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService:
    """
    Request-shaped todo operations.

    Every mutation returns the row as re-read from the store after the write,
    never the values the caller submitted.
    """

    def __init__(self, db: Database) -> None:
        self._todos = TodoRepository(db)

    def get_all(self) -> List[TodoEntity]:
        return self._todos.select_all()

    def get_by_id(self, todo_id: int) -> TodoEntity:
        return self._todos.select_by_id(todo_id)

    def get_filtered(self, done: Optional[bool]) -> List[TodoEntity]:
        return self._todos.select_filtered(done)

    def get_all_matching(self, todo_filter: Union[TodoFilter, str]) -> List[TodoEntity]:
        """
        Return todos for `todo_filter`, given either as a TodoFilter or as one of
        'all', 'active', 'completed' in any letter case. Any other string raises
        ValidationError.
        """
        if not isinstance(todo_filter, TodoFilter):
            todo_filter = TodoFilter.parse(todo_filter)
        return self._todos.select_matching(todo_filter)

    def create(self, name: str) -> TodoEntity:
        todo_id = self._todos.insert(name)
        logger.info("Created todo %s", todo_id)
        return self._todos.select_by_id(todo_id)

    def update(
        self, todo_id: int, name: Optional[str] = None, done: Optional[bool] = None
    ) -> TodoEntity:
        self._todos.update_partial(todo_id, name=name, done=done)
        return self._todos.select_by_id(todo_id)

    def toggle(self, todo_id: int) -> TodoEntity:
        self._todos.toggle_done(todo_id)
        return self._todos.select_by_id(todo_id)

    def delete(self, todo_id: int) -> None:
        self._todos.delete(todo_id)
        logger.info("Deleted todo %s", todo_id)


# PUBLIC_INTERFACE
class TaskService:
    """Task operations, including composition of a task with its linked todos."""

    def __init__(self, db: Database) -> None:
        self._tasks = TaskRepository(db)

    def get_headers(self) -> List[TaskHeaderEntity]:
        return self._tasks.select_headers()

    def get_by_id(self, task_id: int) -> TaskModel:
        """
        Return the task with its todos.

        Two sequential queries: the task row first, so an unknown id raises
        NotFoundError before the join query runs.
        """
        task = self._tasks.select_by_id(task_id)
        todos = self._tasks.select_linked_todos(task_id)
        return {**task, "todos": todos}  # type: ignore[typeddict-item]

    def create(
        self,
        name: str,
        description: str = "",
        due: Optional[datetime] = None,
        done: bool = False,
    ) -> TaskModel:
        """Create a task; `due` defaults to the creation time when not given."""
        task_id = self._tasks.insert(name, description, due if due is not None else utc_now(), done)
        logger.info("Created task %s", task_id)
        return self.get_by_id(task_id)

    def update(
        self,
        task_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        due: Optional[datetime] = None,
        done: Optional[bool] = None,
    ) -> TaskModel:
        self._tasks.update_partial(task_id, name=name, description=description, due=due, done=done)
        return self.get_by_id(task_id)

    def delete(self, task_id: int) -> None:
        orphaned = self._tasks.delete(task_id)
        if orphaned:
            logger.warning(
                "Deleted task %s left %d todo link(s) in tasktodos", task_id, orphaned
            )
        else:
            logger.info("Deleted task %s", task_id)

    def add_todo(self, task_id: int, todo_id: int) -> None:
        self._tasks.add_todo_link(task_id, todo_id)

    def remove_todo(self, task_id: int, todo_id: int) -> None:
        self._tasks.remove_todo_link(task_id, todo_id)


# PUBLIC_INTERFACE
class UserService:
    def __init__(self, db: Database) -> None:
        self._users = UserRepository(db)

    def create(self, name: str) -> UserEntity:
        return {"id": self._users.insert(name), "name": name}


# PUBLIC_INTERFACE
def backup(db: Database, backup_dir: str) -> Path:
    """
    Write a compacted copy of the database into `backup_dir` and return its path.

    The file name carries a UTC timestamp, so repeated backups never collide.
    """
    try:
        os.makedirs(backup_dir, exist_ok=True)
    except OSError as e:
        raise StoreError(f"Could not create backup directory {backup_dir}: {e}") from e
    target = Path(backup_dir) / f"backup-{utc_now().strftime('%Y%m%dT%H%M%S%f')}.db"
    logger.info("Saving backup to %s", target)
    db.vacuum_into(str(target))
    return target
