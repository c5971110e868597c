from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from .db import Database, init_schema
from .errors import AppError
from .logging_setup import RequestLoggerMiddleware, setup_logging
from .routers import html_tasks, html_todos, system
from .routers import tasks as tasks_router
from .routers import todos as todos_router
from .settings import Settings, get_settings
from .viewmodels import IndexView, render

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "todos", "description": "CRUD operations for Todo items."},
    {"name": "tasks", "description": "Tasks and the todos linked to them."},
    {"name": "system", "description": "Users and database backups."},
]


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Map domain errors to their HTTP status with a consistent JSON body.

    Response format:
        {
            "error": "NotFound" | "ValidationError" | "StoreError" | "RenderError",
            "message": "...",
            "detail": ... optional context ...
        }
    """
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.error, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({"error": exc.error, "message": exc.message, "detail": exc.detail}),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return request validation failures as 400 in the same shape as domain errors.
    """
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(
            {
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": exc.errors(),
            }
        ),
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application: configure logging, open the store, create the schema,
    and wire middleware, routes and static assets.

    Schema creation failures propagate, so a broken store aborts startup.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    db = Database(
        settings.database_path,
        max_connections=settings.db_max_connections,
        timeout=settings.db_timeout_seconds,
    )
    init_schema(db)

    app = FastAPI(
        title="appserver",
        description="Todo and task lists with a JSON API and server-rendered HTML fragments.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.db = db

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(RequestLoggerMiddleware)

    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def index(request: Request) -> HTMLResponse:
        return render(request, IndexView())

    app.include_router(todos_router.router)
    app.include_router(tasks_router.router)
    app.include_router(system.router)
    app.include_router(html_todos.router)
    app.include_router(html_tasks.router)
    app.mount("/assets", StaticFiles(directory=settings.assets_dir), name="assets")

    logger.info("appserver ready (db=%s, assets=%s)", settings.database_path, settings.assets_dir)
    return app
