"""
Overlay functions for the update endpoints.

Each function takes an entity freshly loaded from the use case and the
request body of one update operation, and returns a copy of the entity with
exactly that operation's fields replaced. Identifiers, ownership and
timestamps are carried over as loaded; the repository stamps `updated_at`
when the result is saved.
"""
from __future__ import annotations

from .models import CategoryEntity, TaskEntity
from .schemas import CategoryUpdate, TaskCategoryUpdate, TaskStatusUpdate, TaskUpdate


# PUBLIC_INTERFACE
def merge_category_update(category: CategoryEntity, dto: CategoryUpdate) -> CategoryEntity:
    """Rename a category."""
    merged = category.copy()
    merged["type"] = dto.type  # type: ignore[typeddict-item]
    return merged


# PUBLIC_INTERFACE
def merge_task_update(task: TaskEntity, dto: TaskUpdate) -> TaskEntity:
    """Replace a task's title and description."""
    merged = task.copy()
    merged["title"] = dto.title  # type: ignore[typeddict-item]
    merged["description"] = dto.description  # type: ignore[typeddict-item]
    return merged


# PUBLIC_INTERFACE
def merge_task_status(task: TaskEntity, dto: TaskStatusUpdate) -> TaskEntity:
    """Move a task between open (False) and done (True)."""
    merged = task.copy()
    merged["status"] = bool(dto.status)
    return merged


# PUBLIC_INTERFACE
def merge_task_category(task: TaskEntity, dto: TaskCategoryUpdate) -> TaskEntity:
    """File a task under another category."""
    merged = task.copy()
    merged["category_id"] = dto.category_id  # type: ignore[typeddict-item]
    return merged
