from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..dependencies import RowId, get_task_service
from ..schemas import ErrorOut, TaskCreate, TaskHeaderOut, TaskOut, TaskUpdate
from ..services import TaskService

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

_NOT_FOUND = {404: {"model": ErrorOut, "description": "Task not found"}}


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task. `created` is set by the server; `due` defaults to it.",
    responses={400: {"model": ErrorOut, "description": "Validation error"}},
)
def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)) -> TaskOut:
    task = service.create(
        payload.name, description=payload.description, due=payload.due, done=payload.done
    )
    return TaskOut(**task)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskHeaderOut],
    summary="List Tasks",
    description="List id and name of every task.",
)
def list_tasks(service: TaskService = Depends(get_task_service)) -> List[TaskHeaderOut]:
    return [TaskHeaderOut(**h) for h in service.get_headers()]


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a task together with the todos linked to it.",
    responses=_NOT_FOUND,
)
def get_task(task_id: RowId, service: TaskService = Depends(get_task_service)) -> TaskOut:
    return TaskOut(**service.get_by_id(task_id))


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Partially update a task. Omitted fields keep their stored value.",
    responses={**_NOT_FOUND, 400: {"model": ErrorOut, "description": "Malformed body"}},
)
def update_task(
    task_id: RowId, payload: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskOut:
    task = service.update(
        task_id,
        name=payload.name,
        description=payload.description,
        due=payload.due,
        done=payload.done,
    )
    return TaskOut(**task)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description=(
        "Delete a task. Links to todos are not removed; a warning is logged when "
        "links are left behind."
    ),
)
def delete_task(task_id: RowId, service: TaskService = Depends(get_task_service)) -> None:
    service.delete(task_id)
    return None


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/todos/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Link Todo",
    description="Link a todo to a task. Neither id is checked for existence.",
)
def add_todo(
    task_id: RowId, todo_id: RowId, service: TaskService = Depends(get_task_service)
) -> None:
    service.add_todo(task_id, todo_id)
    return None


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}/todos/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unlink Todo",
    description="Remove the link between a task and a todo.",
)
def remove_todo(
    task_id: RowId, todo_id: RowId, service: TaskService = Depends(get_task_service)
) -> None:
    service.remove_todo(task_id, todo_id)
    return None
