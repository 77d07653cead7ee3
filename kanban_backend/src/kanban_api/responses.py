from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence, Union

from fastapi import status
from fastapi.responses import JSONResponse

from .errors import DomainError, get_status_code
from .models import CategoryEntity, TaskEntity

_TASK_FIELDS: Sequence[str] = ("id", "title", "description", "status", "user_id", "category_id")
_CATEGORY_FIELDS: Sequence[str] = ("id", "type")


# PUBLIC_INTERFACE
def data_envelope(code: int, data: Union[Dict[str, Any], List[Any]]) -> Dict[str, Any]:
    """
    Build the success envelope shared by every non-delete endpoint.

    Args:
        code: HTTP status code, repeated in the body.
        data: A single shaped resource or a list of them.

    Returns:
        Dict with keys: code, data.
    """
    return {"code": int(code), "data": data}


def _pick(entity: Any, fields: Iterable[str], stamp: str) -> Dict[str, Any]:
    shaped = {name: entity[name] for name in fields}
    shaped[stamp] = entity[stamp]
    return shaped


# PUBLIC_INTERFACE
def category_created(category: CategoryEntity) -> Dict[str, Any]:
    """201 envelope: id, type, created_at."""
    return data_envelope(status.HTTP_201_CREATED, _pick(category, _CATEGORY_FIELDS, "created_at"))


# PUBLIC_INTERFACE
def category_updated(category: CategoryEntity) -> Dict[str, Any]:
    """200 envelope: id, type, updated_at."""
    return data_envelope(status.HTTP_200_OK, _pick(category, _CATEGORY_FIELDS, "updated_at"))


# PUBLIC_INTERFACE
def task_created(task: TaskEntity) -> Dict[str, Any]:
    """201 envelope: task fields plus created_at."""
    return data_envelope(status.HTTP_201_CREATED, _pick(task, _TASK_FIELDS, "created_at"))


# PUBLIC_INTERFACE
def task_updated(task: TaskEntity) -> Dict[str, Any]:
    """200 envelope: task fields plus updated_at."""
    return data_envelope(status.HTTP_200_OK, _pick(task, _TASK_FIELDS, "updated_at"))


# PUBLIC_INTERFACE
def deleted(resource: str) -> Dict[str, str]:
    return {"message": f"{resource} has been successfully deleted"}


# PUBLIC_INTERFACE
def error_response(err: DomainError) -> JSONResponse:
    """
    Render a domain error as `{"message": ...}` with the status picked by
    the error-kind lookup. 401s carry a Bearer challenge.
    """
    status_code = get_status_code(err)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"message": err.message}, headers=headers)
