"""Product category router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from muebleria_api.dependencies import get_category_service
from muebleria_api.models.domain.account import Account
from muebleria_api.models.domain.role import Role
from muebleria_api.models.dto.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from muebleria_api.security.auth import require_manager, require_roles
from muebleria_api.services.category_service import CategoryService

router = APIRouter()

CategoryReader = Annotated[
    Account,
    Depends(require_roles(Role.DEVELOPER, Role.ADMIN, Role.GESTOR_INVENTARIO, Role.VENDEDOR)),
]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    current_user: Annotated[Account, Depends(require_manager)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryResponse:
    """Create a category."""
    return await category_service.create_category(current_user, body)


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    current_user: CategoryReader,
    category_service: Annotated[CategoryService, Depends(get_category_service)],
    page: int = Query(default=1, ge=1, le=10000),
    page_size: int = Query(default=10, ge=1, le=200),
) -> CategoryListResponse:
    """List categories ordered by name."""
    return await category_service.list_categories(page=page, page_size=page_size)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: UUID,
    current_user: CategoryReader,
    category_service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryResponse:
    """Get a category."""
    return await category_service.get_category(category_id)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    body: CategoryUpdate,
    current_user: Annotated[Account, Depends(require_manager)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryResponse:
    """Rename a category."""
    return await category_service.update_category(current_user, category_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    category_service: Annotated[CategoryService, Depends(get_category_service)],
) -> None:
    """Logically delete a category."""
    await category_service.delete_category(current_user, category_id)
