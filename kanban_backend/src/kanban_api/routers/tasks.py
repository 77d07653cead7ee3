from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ..auth import ensure_task_owner, get_current_principal, require_roles
from ..merge import merge_task_category, merge_task_status, merge_task_update
from ..models import Principal
from ..repositories import TaskQuery
from ..responses import data_envelope, deleted, task_created, task_updated
from ..schemas import (
    DataEnvelope,
    MAX_ID,
    MessageOut,
    TaskCategoryUpdate,
    TaskCreate,
    TaskCreatedOut,
    TaskList,
    TaskStatusUpdate,
    TaskUpdate,
    TaskUpdatedOut,
)
from ..usecases import TaskUsecase, get_task_usecase
from ..validation import validate_required

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_current_principal)],
)

_user_only = require_roles("user")

TaskId = Annotated[int, Path(ge=1, le=MAX_ID, description="Task identifier")]

_ERRORS = {
    400: {"model": MessageOut, "description": "Validation error"},
    401: {"model": MessageOut, "description": "Missing or invalid bearer token, or not the task owner"},
    403: {"model": MessageOut, "description": "Role not allowed"},
    404: {"model": MessageOut, "description": "Task or category not found"},
}


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TaskList,
    summary="List Tasks",
    description=(
        "List tasks ordered by id. Any authenticated caller may read.\n\n"
        "Query parameters:\n"
        "- status: only open (false) or done (true) tasks\n"
        "- category_id: only tasks filed under this category"
    ),
    responses={401: _ERRORS[401]},
)
def get_tasks(
    status_filter: Optional[bool] = Query(None, alias="status", description="Filter by status"),
    category_id: Optional[int] = Query(None, le=MAX_ID, description="Filter by category"),
    usecase: TaskUsecase = Depends(get_task_usecase),
) -> dict:
    tasks = usecase.get_tasks(TaskQuery(status=status_filter, category_id=category_id))
    return data_envelope(status.HTTP_200_OK, tasks)


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=DataEnvelope[TaskCreatedOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create an open task owned by the caller.",
    responses=_ERRORS,
)
def store_task(
    payload: TaskCreate,
    principal: Principal = Depends(_user_only),
    usecase: TaskUsecase = Depends(get_task_usecase),
) -> dict:
    validate_required(payload)
    task = usecase.store_task(
        title=payload.title,  # type: ignore[arg-type]
        description=payload.description,  # type: ignore[arg-type]
        user_id=principal.id,
        category_id=payload.category_id,  # type: ignore[arg-type]
    )
    return task_created(task)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=DataEnvelope[TaskUpdatedOut],
    summary="Update Task",
    description="Replace title and description of a task the caller owns.",
    responses=_ERRORS,
)
def update_task(
    task_id: TaskId,
    payload: TaskUpdate,
    principal: Principal = Depends(_user_only),
    usecase: TaskUsecase = Depends(get_task_usecase),
) -> dict:
    validate_required(payload)
    task = usecase.get_task_by_id(task_id)
    ensure_task_owner(task, principal)
    return task_updated(usecase.update_task(merge_task_update(task, payload)))


# PUBLIC_INTERFACE
@router.patch(
    "/update-status/{task_id}",
    response_model=DataEnvelope[TaskUpdatedOut],
    summary="Update Task Status",
    description="Mark a task the caller owns as done (true) or open again (false).",
    responses=_ERRORS,
)
def update_status_task(
    task_id: TaskId,
    payload: TaskStatusUpdate,
    principal: Principal = Depends(_user_only),
    usecase: TaskUsecase = Depends(get_task_usecase),
) -> dict:
    validate_required(payload)
    task = usecase.get_task_by_id(task_id)
    ensure_task_owner(task, principal)
    return task_updated(usecase.update_task(merge_task_status(task, payload)))


# PUBLIC_INTERFACE
@router.patch(
    "/update-category/{task_id}",
    response_model=DataEnvelope[TaskUpdatedOut],
    summary="Move Task",
    description="File a task the caller owns under another existing category.",
    responses=_ERRORS,
)
def update_category_task(
    task_id: TaskId,
    payload: TaskCategoryUpdate,
    principal: Principal = Depends(_user_only),
    usecase: TaskUsecase = Depends(get_task_usecase),
) -> dict:
    validate_required(payload)
    task = usecase.get_task_by_id(task_id)
    ensure_task_owner(task, principal)
    return task_updated(usecase.update_task(merge_task_category(task, payload)))


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=MessageOut,
    summary="Delete Task",
    description="Delete a task the caller owns.",
    responses=_ERRORS,
)
def delete_task(
    task_id: TaskId,
    principal: Principal = Depends(_user_only),
    usecase: TaskUsecase = Depends(get_task_usecase),
) -> dict:
    task = usecase.get_task_by_id(task_id)
    ensure_task_owner(task, principal)
    usecase.delete_task(task_id)
    return deleted("task")
