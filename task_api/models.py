# task_api/models.py
"""Task model and request/response schemas for the task API."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

TITLE_MAX_LENGTH = 255
STATUS_MAX_LENGTH = 50


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    done = "done"


class Task(SQLModel, table=True):
    """Task database table."""
    __tablename__ = "tasks"
    # Never hand out the id of a deleted row again.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    status: str = Field(max_length=STATUS_MAX_LENGTH)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TaskPayload(SQLModel):
    """Request body for create and update.

    Fields default to empty strings so that missing keys surface as field
    errors from the validation module rather than as parse failures.
    """
    title: str = ""
    status: str = ""


class TaskRead(SQLModel):
    id: int
    title: str
    status: str
    created_at: datetime


class TaskPage(SQLModel):
    """One page of tasks plus the pagination it was fetched with."""
    data: list[TaskRead]
    page: int
    limit: int
    total: int


class Message(SQLModel):
    message: str
