from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError as PydanticValidationError

from ..dependencies import RowId, get_task_service
from ..errors import ValidationError
from ..schemas import TaskCreate
from ..services import TaskService
from ..viewmodels import TaskDetailsView, TaskEditView, TaskIndexView, TaskListView, render

router = APIRouter(prefix="/tasks", tags=["html"], include_in_schema=False)


@router.get("", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    return render(request, TaskIndexView())


@router.post("", response_class=HTMLResponse)
def create(
    request: Request,
    name: str = Form(...),
    description: str = Form(""),
    due: str = Form(""),
    service: TaskService = Depends(get_task_service),
) -> HTMLResponse:
    """
    Create a task from a form post and render the refreshed task list.

    An empty `due` field leaves the due date at the creation time.
    """
    try:
        payload = TaskCreate(name=name, description=description, due=due)
    except PydanticValidationError as e:
        raise ValidationError("Invalid task form", detail=e.errors(include_url=False)) from e
    service.create(payload.name, description=payload.description, due=payload.due)
    return render(request, TaskListView(tasks=service.get_headers()))


@router.get("/all", response_class=HTMLResponse)
def headers(request: Request, service: TaskService = Depends(get_task_service)) -> HTMLResponse:
    return render(request, TaskListView(tasks=service.get_headers()))


@router.get("/{task_id}/edit", response_class=HTMLResponse)
def edit(
    request: Request, task_id: RowId, service: TaskService = Depends(get_task_service)
) -> HTMLResponse:
    return render(request, TaskEditView(task=service.get_by_id(task_id)))


@router.get("/{task_id}/details", response_class=HTMLResponse)
def details(
    request: Request, task_id: RowId, service: TaskService = Depends(get_task_service)
) -> HTMLResponse:
    return render(request, TaskDetailsView(task=service.get_by_id(task_id)))
