from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, TypedDict

from .errors import ValidationError


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo row.

    Fields:
    - id: Unique integer identifier, never reused after delete
    - name: Text of the item
    - done: Boolean completion flag
    """

    id: int
    name: str
    done: bool


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A Task row, without its linked todos.

    Fields:
    - id: Unique integer identifier, never reused after delete
    - name: Short name
    - description: Free text, empty string when not given
    - created: UTC timestamp stamped once at insert
    - due: Due timestamp
    - done: Boolean completion flag
    """

    id: int
    name: str
    description: str
    created: datetime
    due: datetime
    done: bool


class TaskModel(TaskEntity):
    """A Task together with the todos linked to it through tasktodos."""

    todos: List[TodoEntity]


class TaskHeaderEntity(TypedDict):
    id: int
    name: str


class UserEntity(TypedDict):
    id: int
    name: str


# PUBLIC_INTERFACE
class TodoFilter(str, Enum):
    """Closed set of todo list filters."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: str) -> "TodoFilter":
        """Parse a filter name case-insensitively; anything else is a ValidationError."""
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValidationError(
            "Invalid filter",
            detail=f"filter must be one of {', '.join(m.value for m in cls)}; got {value!r}",
        )

    @classmethod
    def from_done(cls, done: Optional[bool]) -> "TodoFilter":
        if done is None:
            return cls.ALL
        return cls.COMPLETED if done else cls.ACTIVE
