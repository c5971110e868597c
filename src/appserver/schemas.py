from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Shared type for incoming due dates which can be a date, datetime, or ISO8601 string
DueDateInput = Union[date, datetime, str]


def _parse_due_date(value: Optional[DueDateInput]) -> Optional[datetime]:
    """
    Internal helper to normalize due input into a datetime.
    - None or a blank string means "not supplied".
    - If value is a string, attempt to parse via datetime.fromisoformat; if time is missing, set to 00:00.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - If value is a datetime, return as-is.
    Naive results are stored as UTC.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 0, 0, 0)

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, 0, 0, 0)
            except ValueError as e:
                raise ValueError(
                    "Invalid due format. Use ISO8601 date or datetime string (e.g., '2024-02-01' or '2024-02-01T13:45:00')."
                ) from e

    raise ValueError("Invalid type for due; expected date, datetime, or ISO8601 string.")


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    s = v.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError("name length must be between 1 and 200 characters")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item. New todos always start with done = false.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Kiss Jana"}})

    name: str = Field(..., description="Text of the todo item", min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _clean_name(v)  # type: ignore[return-value]


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"name": "Kiss Jana twice", "done": True}},
    )

    name: Optional[str] = Field(default=None, description="Text of the todo item")
    done: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 1, "name": "Kiss Jana", "done": False}}
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    name: str = Field(..., description="Text of the todo item")
    done: bool = Field(..., description="Completion status flag")


class TodoList(BaseModel):
    items: List[TodoOut] = Field(..., description="List of Todo items")


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a Task. `created` is always set by the server; `due`
    defaults to the creation time when omitted.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Implement all tables",
                "description": "Need to add tables for all data rows, as well as mapping tables",
                "due": "2024-02-01",
            }
        }
    )

    name: str = Field(..., description="Short name of the task", min_length=1, max_length=200)
    description: str = Field(default="", description="Free text description")
    due: Optional[datetime] = Field(
        default=None,
        description="Due date/time. Accepts ISO8601 date or datetime; dates are set to 00:00 UTC",
    )
    done: bool = Field(default=False, description="Completion status flag")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)  # type: ignore[return-value]

    @field_validator("due", mode="before")
    @classmethod
    def parse_due(cls, v: Optional[DueDateInput]) -> Optional[datetime]:
        """
        Normalize due from str/date/datetime to datetime.
        """
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for partially updating a Task.
    Fields left out (or null) keep their stored value; `created` cannot be changed.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"done": True, "due": "2024-02-02T09:30:00"}},
    )

    name: Optional[str] = Field(default=None, description="Short name of the task")
    description: Optional[str] = Field(default=None, description="Free text description")
    due: Optional[datetime] = Field(default=None, description="Due date/time")
    done: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)

    @field_validator("due", mode="before")
    @classmethod
    def parse_due(cls, v: Optional[DueDateInput]) -> Optional[datetime]:
        return _parse_due_date(v)


class TaskHeaderOut(BaseModel):
    id: int = Field(..., description="Unique identifier of the task")
    name: str = Field(..., description="Short name of the task")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task, including its linked todos.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Implement all tables",
                "description": "Need to add tables for all data rows, as well as mapping tables",
                "created": "2024-01-20T10:15:30.123456+00:00",
                "due": "2024-02-01T00:00:00+00:00",
                "done": False,
                "todos": [{"id": 1, "name": "Kiss Jana", "done": False}],
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    name: str = Field(..., description="Short name of the task")
    description: str = Field(..., description="Free text description")
    created: datetime = Field(..., description="Creation timestamp (UTC)")
    due: datetime = Field(..., description="Due timestamp (UTC)")
    done: bool = Field(..., description="Completion status flag")
    todos: List[TodoOut] = Field(default_factory=list, description="Todos linked to this task")


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=200)


class UserOut(BaseModel):
    id: int
    username: str


class BackupOut(BaseModel):
    path: str = Field(..., description="Path of the written backup file")


class ErrorOut(BaseModel):
    """Body of every error response."""

    error: str
    message: str
    detail: Optional[Any] = None
