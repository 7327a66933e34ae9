# task_api/repository.py
"""Data access for tasks on top of an injected SQLModel session."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from task_api.errors import StoreError, TaskNotFoundError
from task_api.models import Task

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# SQLite and MySQL integers are signed 64-bit; ids and offsets must fit.
MAX_INT64 = 2**63 - 1
MAX_PAGE = MAX_INT64 // MAX_LIMIT


def normalize_pagination(page: int, limit: int) -> Tuple[int, int]:
    """Clamp page/limit: page<1 -> 1, limit<1 -> default, limit>100 -> 100.

    Page is also capped so that the row offset stays a 64-bit integer.
    """
    if page < 1:
        page = DEFAULT_PAGE
    if page > MAX_PAGE:
        page = MAX_PAGE
    if limit < 1:
        limit = DEFAULT_LIMIT
    if limit > MAX_LIMIT:
        limit = MAX_LIMIT
    return page, limit


class TaskRepository:
    """CRUD, count and paginated listing of tasks.

    Every backend failure is rolled back and re-raised as StoreError.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, title: str, status: str) -> Task:
        task = Task(title=title, status=status)
        self._commit(task, "create task")
        logger.info("Created task %s", task.id)
        return task

    def get_by_id(self, task_id: int) -> Task:
        if not -MAX_INT64 - 1 <= task_id <= MAX_INT64:
            raise TaskNotFoundError(task_id)
        try:
            task = self._session.get(Task, task_id)
        except SQLAlchemyError as exc:
            raise self._fail("fetch task", exc) from exc
        if task is None:
            logger.debug("Task %s not found", task_id)
            raise TaskNotFoundError(task_id)
        return task

    def update(self, task_id: int, title: str, status: str) -> Task:
        task = self.get_by_id(task_id)
        task.title = title
        task.status = status
        self._commit(task, "update task")
        logger.info("Updated task %s", task_id)
        return task

    def delete(self, task_id: int) -> None:
        task = self.get_by_id(task_id)
        try:
            self._session.delete(task)
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete task", exc) from exc
        logger.info("Deleted task %s", task_id)

    def list(
        self,
        status: Optional[str] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> Tuple[List[Task], int]:
        """Return one page of tasks, newest id first, and the total match count."""
        page, limit = normalize_pagination(page, limit)

        statement = select(Task)
        count_statement = select(func.count()).select_from(Task)
        if status is not None:
            statement = statement.where(Task.status == status)
            count_statement = count_statement.where(Task.status == status)
        statement = statement.order_by(Task.id.desc()).offset((page - 1) * limit).limit(limit)

        try:
            total = self._session.exec(count_statement).one()
            items = list(self._session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise self._fail("list tasks", exc) from exc
        return items, total

    # -- private helpers ------------------------------------------------------

    def _commit(self, task: Task, operation: str) -> None:
        try:
            self._session.add(task)
            self._session.commit()
            self._session.refresh(task)
        except SQLAlchemyError as exc:
            raise self._fail(operation, exc) from exc

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StoreError:
        logger.exception("Failed to %s", operation)
        try:
            self._session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after failed %s also failed", operation)
        return StoreError(f"failed to {operation}")
