from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import ValidationError as PydanticValidationError

from ..dependencies import RowId, get_todo_service
from ..errors import ValidationError
from ..models import TodoFilter
from ..schemas import TodoCreate
from ..services import TodoService
from ..viewmodels import TodoIndexView, TodoListView, TodoView, render

router = APIRouter(prefix="/todos", tags=["html"], include_in_schema=False)


@router.get("", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    return render(request, TodoIndexView(filter=TodoFilter.ALL.value))


@router.post("", response_class=HTMLResponse)
def create(
    request: Request,
    name: str = Form(...),
    service: TodoService = Depends(get_todo_service),
) -> HTMLResponse:
    """Create a todo from a form post and render it as stored."""
    try:
        payload = TodoCreate(name=name)
    except PydanticValidationError as e:
        raise ValidationError("Invalid todo form", detail=e.errors(include_url=False)) from e
    return render(request, TodoView(todo=service.create(payload.name)))


@router.get("/all", response_class=HTMLResponse)
def all_todos(request: Request, service: TodoService = Depends(get_todo_service)) -> HTMLResponse:
    return render(request, TodoListView(filter=TodoFilter.ALL.value, todos=service.get_all()))


@router.get("/find", response_class=HTMLResponse)
def by_query(
    request: Request,
    done: Optional[bool] = Query(None),
    service: TodoService = Depends(get_todo_service),
) -> HTMLResponse:
    todos = service.get_filtered(done)
    return render(request, TodoListView(filter=TodoFilter.from_done(done).value, todos=todos))


@router.get("/filter/{filter_name}", response_class=HTMLResponse)
def by_filter(
    request: Request, filter_name: str, service: TodoService = Depends(get_todo_service)
) -> HTMLResponse:
    """Render the list for 'all', 'active' or 'completed'; other names are a 400."""
    todo_filter = TodoFilter.parse(filter_name)
    return render(
        request, TodoListView(filter=todo_filter.value, todos=service.get_all_matching(todo_filter))
    )


@router.get("/{todo_id}", response_class=HTMLResponse)
def by_id(
    request: Request, todo_id: RowId, service: TodoService = Depends(get_todo_service)
) -> HTMLResponse:
    return render(request, TodoView(todo=service.get_by_id(todo_id)))


@router.put("/{todo_id}/toggle", response_class=HTMLResponse)
def toggle(
    request: Request, todo_id: RowId, service: TodoService = Depends(get_todo_service)
) -> HTMLResponse:
    return render(request, TodoView(todo=service.toggle(todo_id)))


@router.delete("/{todo_id}")
def delete(todo_id: RowId, service: TodoService = Depends(get_todo_service)) -> Response:
    # Empty body: htmx removes the swapped element.
    service.delete(todo_id)
    return Response(status_code=200)
