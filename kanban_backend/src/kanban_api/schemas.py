from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator

T = TypeVar("T")

# Largest id a SQLite INTEGER column can hold
MAX_ID = 2**63 - 1


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class RequestDTO(BaseModel):
    """
    Base class for request bodies.

    Every field is optional at the parsing level so that a missing field is
    reported by the validation gate ("<field> is required") instead of by
    pydantic. `required_fields` lists the fields the gate checks, in the order
    they are checked.
    """

    required_fields: ClassVar[Tuple[str, ...]] = ()


# PUBLIC_INTERFACE
class CategoryCreate(RequestDTO):
    """Body of POST /categories/."""

    model_config = ConfigDict(json_schema_extra={"example": {"type": "Backlog"}})

    required_fields: ClassVar[Tuple[str, ...]] = ("type",)

    type: Optional[str] = Field(default=None, description="Column name, e.g. 'Backlog'")

    @field_validator("type")
    @classmethod
    def strip_type(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


# PUBLIC_INTERFACE
class CategoryUpdate(CategoryCreate):
    """Body of PATCH /categories/{category_id}."""


# PUBLIC_INTERFACE
class TaskCreate(RequestDTO):
    """Body of POST /tasks/."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Fix bug", "description": "Login fails on Safari", "category_id": 1}
        }
    )

    required_fields: ClassVar[Tuple[str, ...]] = ("title", "description", "category_id")

    title: Optional[str] = Field(default=None, description="Short title of the task")
    description: Optional[str] = Field(default=None, description="Details of the task")
    category_id: Optional[StrictInt] = Field(
        default=None, le=MAX_ID, description="Category the task is filed under"
    )

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """Strip surrounding whitespace; a blank value is then caught as missing."""
        return _strip(v)


# PUBLIC_INTERFACE
class TaskUpdate(RequestDTO):
    """Body of PUT /tasks/{task_id}."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Fix login bug", "description": "Safari only"}}
    )

    required_fields: ClassVar[Tuple[str, ...]] = ("title", "description")

    title: Optional[str] = Field(default=None, description="Short title of the task")
    description: Optional[str] = Field(default=None, description="Details of the task")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


# PUBLIC_INTERFACE
class TaskStatusUpdate(RequestDTO):
    """
    Body of PATCH /tasks/update-status/{task_id}.

    `status` must be present and a JSON boolean. Both true and false are
    accepted; strings and numbers such as "yes" or 0 are rejected.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"status": True}})

    required_fields: ClassVar[Tuple[str, ...]] = ("status",)

    status: Optional[StrictBool] = Field(default=None, description="False while open, true once done")


# PUBLIC_INTERFACE
class TaskCategoryUpdate(RequestDTO):
    """Body of PATCH /tasks/update-category/{task_id}."""

    model_config = ConfigDict(json_schema_extra={"example": {"category_id": 2}})

    required_fields: ClassVar[Tuple[str, ...]] = ("category_id",)

    category_id: Optional[StrictInt] = Field(default=None, le=MAX_ID, description="Category to move the task to")


# PUBLIC_INTERFACE
class CategoryOut(BaseModel):
    """Category as returned by GET /categories/."""

    id: int = Field(..., description="Unique identifier of the category")
    type: str = Field(..., description="Column name")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class CategoryCreatedOut(BaseModel):
    id: int
    type: str
    created_at: datetime


class CategoryUpdatedOut(BaseModel):
    id: int
    type: str
    updated_at: datetime


class _TaskFields(BaseModel):
    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title of the task")
    description: str = Field(..., description="Details of the task")
    status: bool = Field(..., description="False while open, true once done")
    user_id: int = Field(..., description="Identity that created the task")
    category_id: int = Field(..., description="Category the task is filed under")


# PUBLIC_INTERFACE
class TaskOut(_TaskFields):
    """Task as returned by GET /tasks/."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 7,
                "title": "Fix bug",
                "description": "Login fails on Safari",
                "status": False,
                "user_id": 42,
                "category_id": 1,
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
            }
        }
    )

    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class TaskCreatedOut(_TaskFields):
    created_at: datetime


class TaskUpdatedOut(_TaskFields):
    updated_at: datetime


# PUBLIC_INTERFACE
class DataEnvelope(BaseModel, Generic[T]):
    """Success envelope: the HTTP status repeated as `code` plus the payload."""

    code: int = Field(..., description="HTTP status code of the response")
    data: T


# PUBLIC_INTERFACE
class MessageOut(BaseModel):
    """Body of delete confirmations and of every error response."""

    message: str = Field(..., description="Human readable outcome")


CategoryList = DataEnvelope[List[CategoryOut]]
TaskList = DataEnvelope[List[TaskOut]]
