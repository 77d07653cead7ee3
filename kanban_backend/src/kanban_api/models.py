from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class CategoryEntity(TypedDict):
    """
    A kanban column (e.g. "Backlog", "In Progress") as stored by the repositories.

    Fields:
    - id: Unique integer identifier
    - type: Column name, never empty
    - created_at: Creation timestamp
    - updated_at: Last update timestamp
    """

    id: int
    type: str
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A card on the board.

    Fields:
    - id: Unique integer identifier
    - title: Short title, never empty
    - description: Details, never empty
    - status: False while open, True once done
    - user_id: Identity that created the task; never changes afterwards
    - category_id: Category the task is filed under
    - created_at: Creation timestamp
    - updated_at: Last update timestamp
    """

    id: int
    title: str
    description: str
    status: bool
    user_id: int
    category_id: int
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Principal:
    """Authenticated caller decoded from a bearer token."""

    id: int
    role: str
    email: Optional[str] = None
