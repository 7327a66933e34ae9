# task_api/main.py
"""FastAPI application for the task management API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_api import __version__, config
from task_api.database import Database
from task_api.errors import TaskAPIError, TaskNotFoundError, error_from_validation
from task_api.routes.tasks import router as tasks_router

logger = logging.getLogger(__name__)


async def handle_task_api_error(request: Request, exc: TaskAPIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map FastAPI's parse errors onto the API's own error kinds.

    Bad path ids are reported as missing tasks; body errors go through
    error_from_validation with the leading ``body`` location dropped.
    """
    errors = []
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc and loc[0] == "path":
            return await handle_task_api_error(request, TaskNotFoundError())
        errors.append({**error, "loc": loc[1:]})
    return await handle_task_api_error(request, error_from_validation(errors))


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Build the application around its own Database.

    The table is created (and missing columns added) on startup.
    """
    database = Database(database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        logger.info("Task store ready at %s", database.engine.url.render_as_string(hide_password=True))
        yield
        database.dispose()

    app = FastAPI(
        title="Task Management API",
        description="REST API for task management (CRUD, pagination, status filter)",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(TaskAPIError, handle_task_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(tasks_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "task-api"}

    return app


app = create_app()
