from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from ..auth import get_current_principal, require_roles
from ..merge import merge_category_update
from ..responses import category_created, category_updated, data_envelope, deleted
from ..schemas import (
    CategoryCreate,
    CategoryCreatedOut,
    CategoryList,
    CategoryUpdate,
    CategoryUpdatedOut,
    DataEnvelope,
    MAX_ID,
    MessageOut,
)
from ..usecases import CategoryUsecase, get_category_usecase
from ..validation import validate_required

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    dependencies=[Depends(get_current_principal)],
)

_user_only = require_roles("user")

CategoryId = Annotated[int, Path(ge=1, le=MAX_ID, description="Category identifier")]

_ERRORS = {
    400: {"model": MessageOut, "description": "Validation error"},
    401: {"model": MessageOut, "description": "Missing or invalid bearer token"},
    403: {"model": MessageOut, "description": "Role not allowed"},
}


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=CategoryList,
    summary="List Categories",
    description="List every category. Any authenticated caller may read.",
    responses={401: _ERRORS[401]},
)
def get_categories(usecase: CategoryUsecase = Depends(get_category_usecase)) -> dict:
    return data_envelope(status.HTTP_200_OK, usecase.get_categories())


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=DataEnvelope[CategoryCreatedOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    responses=_ERRORS,
    dependencies=[Depends(_user_only)],
)
def store_category(
    payload: CategoryCreate,
    usecase: CategoryUsecase = Depends(get_category_usecase),
) -> dict:
    """
    Create a category. `type` is required.
    """
    validate_required(payload)
    return category_created(usecase.store_category(payload.type))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.patch(
    "/{category_id}",
    response_model=DataEnvelope[CategoryUpdatedOut],
    summary="Rename Category",
    responses={**_ERRORS, 404: {"model": MessageOut, "description": "Category not found"}},
    dependencies=[Depends(_user_only)],
)
def update_category(
    category_id: CategoryId,
    payload: CategoryUpdate,
    usecase: CategoryUsecase = Depends(get_category_usecase),
) -> dict:
    """
    Rename a category; every other field is kept as stored.
    """
    validate_required(payload)
    category = usecase.get_category_by_id(category_id)
    return category_updated(usecase.update_category(merge_category_update(category, payload)))


# PUBLIC_INTERFACE
@router.delete(
    "/{category_id}",
    response_model=MessageOut,
    summary="Delete Category",
    description="Delete a category together with the tasks filed under it.",
    responses={**_ERRORS, 404: {"model": MessageOut, "description": "Category not found"}},
    dependencies=[Depends(_user_only)],
)
def delete_category(
    category_id: CategoryId,
    usecase: CategoryUsecase = Depends(get_category_usecase),
) -> dict:
    usecase.delete_category(category_id)
    return deleted("category")
