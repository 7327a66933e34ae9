# task_api/routes/tasks.py
"""CRUD endpoints for tasks."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Request
from pydantic import ValidationError
from sqlmodel import Session

from task_api.database import get_session
from task_api.errors import error_from_validation
from task_api.models import Message, Task, TaskPage, TaskPayload, TaskRead
from task_api.repository import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_INT64,
    TaskRepository,
    normalize_pagination,
)
from task_api.validation import validate, validate_status_filter

router = APIRouter(prefix="/tasks", tags=["tasks"])

_PAYLOAD_OPENAPI = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": TaskPayload.model_json_schema()}},
    }
}


def get_repository(session: Session = Depends(get_session)) -> TaskRepository:
    return TaskRepository(session)


def get_existing_task(
    task_id: int = Path(ge=-MAX_INT64 - 1, le=MAX_INT64),
    repository: TaskRepository = Depends(get_repository),
) -> Task:
    """Resolve the path id to a task, raising 404 before the body is read."""
    return repository.get_by_id(task_id)


async def read_update_payload(
    request: Request, task: Task = Depends(get_existing_task)
) -> TaskPayload:
    """Parse the update body, only once the task is known to exist."""
    try:
        return TaskPayload.model_validate_json(await request.body())
    except ValidationError as exc:
        raise error_from_validation(exc.errors()) from exc


def _parse_int(value: Optional[str], default: int) -> int:
    """Lenient query-string int. Anything unparseable falls back to *default*."""
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


@router.post("", status_code=201, response_model=TaskRead)
def create_task(
    body: TaskPayload, repository: TaskRepository = Depends(get_repository)
) -> Task:
    """Create a new task."""
    title, status = validate(body.title, body.status)
    return repository.create(title, status)


@router.get("", response_model=TaskPage)
def list_tasks(
    status: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    repository: TaskRepository = Depends(get_repository),
) -> TaskPage:
    """List tasks newest first, optionally filtered by exact status."""
    status_filter = validate_status_filter(status)
    page_num, limit_num = normalize_pagination(
        _parse_int(page, DEFAULT_PAGE), _parse_int(limit, DEFAULT_LIMIT)
    )
    items, total = repository.list(status_filter, page_num, limit_num)
    return TaskPage(
        data=[TaskRead.model_validate(task) for task in items],
        page=page_num,
        limit=limit_num,
        total=total,
    )


@router.get("/{task_id}", response_model=TaskRead)
def get_task(task: Task = Depends(get_existing_task)) -> Task:
    """Get a single task by ID."""
    return task


@router.put("/{task_id}", response_model=TaskRead, openapi_extra=_PAYLOAD_OPENAPI)
def update_task(
    task: Task = Depends(get_existing_task),
    body: TaskPayload = Depends(read_update_payload),
    repository: TaskRepository = Depends(get_repository),
) -> Task:
    """Replace the title and status of an existing task."""
    title, status = validate(body.title, body.status)
    return repository.update(task.id, title, status)


@router.delete("/{task_id}", response_model=Message)
def delete_task(
    task: Task = Depends(get_existing_task),
    repository: TaskRepository = Depends(get_repository),
) -> Message:
    """Delete a task by ID."""
    repository.delete(task.id)
    return Message(message="task deleted")
