from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Path, Request

from .db import Database
from .services import TaskService, TodoService, UserService
from .settings import Settings

# SQLite binds INTEGER parameters as signed 64-bit values.
MAX_ROW_ID = 2**63 - 1

RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


# PUBLIC_INTERFACE
def get_database(request: Request) -> Database:
    """Return the store handle created by `create_app` for this application."""
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_todo_service(db: Database = Depends(get_database)) -> TodoService:
    return TodoService(db)


def get_task_service(db: Database = Depends(get_database)) -> TaskService:
    return TaskService(db)


def get_user_service(db: Database = Depends(get_database)) -> UserService:
    return UserService(db)
