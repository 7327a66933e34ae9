# task_api/errors.py
"""Error kinds raised by the task API and their HTTP mapping."""

from typing import Dict, Iterable, List


class TaskAPIError(Exception):
    """Base error. Each subclass maps to one HTTP status."""

    status_code = 500
    message = "internal error"

    def __init__(self, message: str = "") -> None:
        if message:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"error": self.message}


class MalformedRequestError(TaskAPIError):
    status_code = 400
    message = "invalid JSON body"


class TaskValidationError(TaskAPIError):
    """Field-level validation failure carrying ``field -> [messages]``."""

    status_code = 422
    message = "validation failed"

    def __init__(self, fields: Dict[str, List[str]]) -> None:
        super().__init__()
        self.fields = fields

    def to_payload(self) -> dict:
        return {"error": self.message, "fields": self.fields}


class TaskNotFoundError(TaskAPIError):
    status_code = 404
    message = "task not found"

    def __init__(self, task_id=None) -> None:
        super().__init__()
        self.task_id = task_id


class StoreError(TaskAPIError):
    """The backing store was unavailable or rejected a query."""

    status_code = 500
    message = "store operation failed"


def error_from_validation(errors: Iterable[dict]) -> TaskAPIError:
    """Translate pydantic errors for a request body into one API error.

    Locations are relative to the body, so an empty location means the body
    itself was unparseable or not an object.
    """
    fields: Dict[str, List[str]] = {}
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if error.get("type") == "json_invalid" or not loc:
            return MalformedRequestError()
        fields.setdefault(str(loc[-1]), []).append(error.get("msg", "invalid value"))
    return TaskValidationError(fields)
