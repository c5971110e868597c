from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar, Dict, List

from fastapi import Request
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from starlette.responses import HTMLResponse

from .errors import RenderError
from .models import TaskHeaderEntity, TaskModel, TodoEntity, TodoFilter

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@dataclass
class View:
    """Base for view-models: the data one template needs, and the template's name."""

    template: ClassVar[str]

    def context(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class IndexView(View):
    template: ClassVar[str] = "index.html"


@dataclass
class TodoView(View):
    template: ClassVar[str] = "todo.html"
    todo: TodoEntity


@dataclass
class TodoListView(View):
    template: ClassVar[str] = "todos.html"
    filter: str
    todos: List[TodoEntity] = field(default_factory=list)


@dataclass
class TodoIndexView(View):
    template: ClassVar[str] = "todo_index.html"
    filter: str = TodoFilter.ALL.value


@dataclass
class TaskIndexView(View):
    template: ClassVar[str] = "task_index.html"


@dataclass
class TaskListView(View):
    template: ClassVar[str] = "tasks.html"
    tasks: List[TaskHeaderEntity] = field(default_factory=list)


@dataclass
class TaskEditView(View):
    template: ClassVar[str] = "tasks/edit.html"
    task: TaskModel


@dataclass
class TaskDetailsView(View):
    template: ClassVar[str] = "tasks/details.html"
    task: TaskModel


# PUBLIC_INTERFACE
def render(request: Request, view: View, status_code: int = 200) -> HTMLResponse:
    """
    Render `view` into an HTML response.

    Raises:
        RenderError: if the template is missing or fails to render.
    """
    try:
        return templates.TemplateResponse(
            request, view.template, view.context(), status_code=status_code
        )
    except TemplateError as e:
        logger.exception("Failed to render %s", view.template)
        raise RenderError(f"Failed to render {view.template}", detail=str(e)) from e
