from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import RowId, get_todo_service
from ..schemas import ErrorOut, TodoCreate, TodoList, TodoOut, TodoUpdate
from ..services import TodoService

router = APIRouter(
    prefix="/api/todo",
    tags=["todos"],
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item (done = false) and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"model": ErrorOut, "description": "Validation error"},
    },
)
def create_todo(payload: TodoCreate, service: TodoService = Depends(get_todo_service)) -> TodoOut:
    """
    Create a new Todo.
    """
    return TodoOut(**service.create(payload.name))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TodoList,
    summary="List Todos",
    description=(
        "List todos.\n\n"
        "Query parameters:\n"
        "- done: when given, only todos with this completion status are returned"
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"model": ErrorOut, "description": "Invalid query parameters"},
    },
)
def list_todos(
    done: Optional[bool] = Query(None, description="Filter by completion status"),
    service: TodoService = Depends(get_todo_service),
) -> TodoList:
    """
    List todos, optionally filtered by completion status.
    """
    return TodoList(items=[TodoOut(**t) for t in service.get_filtered(done)])


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def get_todo(todo_id: RowId, service: TodoService = Depends(get_todo_service)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**service.get_by_id(todo_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Update a Todo item. Fields left out of the body keep their stored value.",
    responses={
        200: {"description": "Todo updated"},
        400: {"model": ErrorOut, "description": "Malformed body"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def update_todo(
    todo_id: RowId, payload: TodoUpdate, service: TodoService = Depends(get_todo_service)
) -> TodoOut:
    """
    Partial update of a Todo item; the response is the row as stored after the write.
    """
    return TodoOut(**service.update(todo_id, name=payload.name, done=payload.done))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Deleting an unknown ID also succeeds.",
    responses={204: {"description": "Todo deleted"}},
)
def delete_todo(todo_id: RowId, service: TodoService = Depends(get_todo_service)) -> None:
    """
    Delete a Todo. Returns 204 whether or not the row existed.
    """
    service.delete(todo_id)
    return None
