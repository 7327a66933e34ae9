# task_api/validation.py
"""Boundary checks for task fields.

All functions here are pure: they trim their inputs, never touch the store,
and report problems as a mapping of field name to messages.
"""

from typing import Dict, List, Optional, Tuple

from task_api.errors import TaskValidationError
from task_api.models import TITLE_MAX_LENGTH, TaskStatus

ALLOWED_STATUSES = tuple(status.value for status in TaskStatus)


def _status_message() -> str:
    return f"status must be one of: {', '.join(ALLOWED_STATUSES)}"


def check_fields(title: str, status: str) -> Dict[str, List[str]]:
    """Return field errors for a title/status pair, empty when both are valid."""
    errors: Dict[str, List[str]] = {}
    title = (title or "").strip()
    status = (status or "").strip()

    if not title:
        errors.setdefault("title", []).append("title must not be empty")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.setdefault("title", []).append(
            f"title must be at most {TITLE_MAX_LENGTH} characters"
        )

    if not status:
        errors.setdefault("status", []).append("status must not be empty")
    elif status not in ALLOWED_STATUSES:
        errors.setdefault("status", []).append(_status_message())

    return errors


def validate(title: str, status: str) -> Tuple[str, str]:
    """Return the trimmed ``(title, status)`` or raise TaskValidationError."""
    errors = check_fields(title, status)
    if errors:
        raise TaskValidationError(errors)
    return title.strip(), status.strip()


def validate_status_filter(status: Optional[str]) -> Optional[str]:
    """Normalise the list filter. Blank means no filter."""
    status = (status or "").strip()
    if not status:
        return None
    if status not in ALLOWED_STATUSES:
        raise TaskValidationError({"status": [_status_message()]})
    return status
