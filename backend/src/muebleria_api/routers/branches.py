"""Store branch router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from muebleria_api.dependencies import get_branch_service
from muebleria_api.models.domain.account import Account
from muebleria_api.models.domain.branch import BranchStatus
from muebleria_api.models.domain.role import Role
from muebleria_api.models.dto.branch import (
    BranchCreate,
    BranchListResponse,
    BranchOption,
    BranchResponse,
    BranchUpdate,
)
from muebleria_api.security.auth import require_manager, require_roles
from muebleria_api.services.branch_service import BranchService

router = APIRouter()

BranchReader = Annotated[Account, Depends(require_roles(Role.DEVELOPER, Role.ADMIN, Role.GESTOR_SUCURSAL))]


@router.post("", response_model=BranchResponse, status_code=status.HTTP_201_CREATED)
async def create_branch(
    body: BranchCreate,
    current_user: Annotated[Account, Depends(require_manager)],
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
) -> BranchResponse:
    """Create a branch."""
    return await branch_service.create_branch(current_user, body)


@router.get("/summary", response_model=list[BranchOption])
async def list_branch_options(
    current_user: BranchReader,
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
) -> list[BranchOption]:
    """Id and name of every active branch, for selection lists."""
    return await branch_service.list_options()


@router.get("", response_model=BranchListResponse)
async def list_branches(
    current_user: BranchReader,
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
    status: BranchStatus = BranchStatus.ACTIVE,
    search: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1, le=10000),
    page_size: int = Query(default=20, ge=1, le=200),
) -> BranchListResponse:
    """List branches. Deleted branches are listed for DEVELOPER only."""
    return await branch_service.list_branches(
        current_user,
        status=status,
        search=search,
        page=page,
        page_size=page_size,
    )


@router.get("/{branch_id}", response_model=BranchResponse)
async def get_branch(
    branch_id: UUID,
    current_user: BranchReader,
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
) -> BranchResponse:
    """Get a branch."""
    return await branch_service.get_branch(current_user, branch_id)


@router.put("/{branch_id}", response_model=BranchResponse)
async def update_branch(
    branch_id: UUID,
    body: BranchUpdate,
    current_user: Annotated[Account, Depends(require_manager)],
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
) -> BranchResponse:
    """Update the provided fields of a branch."""
    return await branch_service.update_branch(current_user, branch_id, body)


@router.delete("/{branch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_branch(
    branch_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
) -> None:
    """Logically delete a branch."""
    await branch_service.delete_branch(current_user, branch_id)


@router.post("/{branch_id}/restore", response_model=BranchResponse)
async def restore_branch(
    branch_id: UUID,
    current_user: Annotated[Account, Depends(require_roles(Role.DEVELOPER))],
    branch_service: Annotated[BranchService, Depends(get_branch_service)],
) -> BranchResponse:
    """Restore a logically deleted branch."""
    return await branch_service.restore_branch(current_user, branch_id)
