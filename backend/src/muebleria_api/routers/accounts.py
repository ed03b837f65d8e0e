"""Staff account management router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from muebleria_api.dependencies import get_account_service
from muebleria_api.models.domain.account import Account, AccountStatus
from muebleria_api.models.domain.role import Role
from muebleria_api.models.dto.account import (
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    AdminPasswordResetRequest,
    DriverDetailsRequest,
    ProfileUpdateRequest,
    UsernameCheckResponse,
)
from muebleria_api.security.auth import require_manager
from muebleria_api.security.rate_limit import ACCOUNT_CREATE_LIMIT, AUTH_PASSWORD_CHANGE_LIMIT, limiter
from muebleria_api.services.account_service import AccountService

router = APIRouter()


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(ACCOUNT_CREATE_LIMIT)
async def create_account(
    request: Request,
    body: AccountCreate,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Create a staff account, optionally with its initial work schedule."""
    return await account_service.create_account(current_user, body)


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
    status: AccountStatus = AccountStatus.ACTIVE,
    role: Role | None = None,
    branch_id: UUID | None = None,
    search: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1, le=10000),
    page_size: int = Query(default=50, ge=1, le=200),
) -> AccountListResponse:
    """List the accounts the current user may manage."""
    return await account_service.list_accounts(
        current_user,
        status=status,
        search=search,
        role=role,
        branch_id=branch_id,
        page=page,
        page_size=page_size,
    )


@router.get("/check-username", response_model=UsernameCheckResponse)
async def check_username(
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
    username: str = Query(min_length=1, max_length=100),
) -> UsernameCheckResponse:
    """Check whether a username is still available."""
    taken = await account_service.is_username_taken(username)
    return UsernameCheckResponse(username=username, available=not taken)


@router.get("/by-username/{username}", response_model=AccountResponse)
async def get_account_by_username(
    username: str,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Get an account by its username."""
    return await account_service.get_by_username(current_user, username)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Get an account with its work schedule."""
    return await account_service.get_account(current_user, account_id)


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: UUID,
    body: AccountUpdate,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Update active state, access rule bypass, role, managed branch or driver details."""
    return await account_service.update_account(current_user, account_id, body)


@router.put("/{account_id}/password")
@limiter.limit(AUTH_PASSWORD_CHANGE_LIMIT)
async def reset_password(
    request: Request,
    account_id: UUID,
    body: AdminPasswordResetRequest,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> dict:
    """Set a new password for another account and end its sessions."""
    await account_service.reset_password(current_user, account_id, body.new_password)
    return {"success": True, "message": "Password updated"}


@router.patch("/{account_id}/profile", response_model=AccountResponse)
async def update_profile(
    account_id: UUID,
    body: ProfileUpdateRequest,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Update names and contact data of another account."""
    return await account_service.update_profile(current_user, account_id, body)


@router.put("/{account_id}/driver-details", response_model=AccountResponse)
async def update_driver_details(
    account_id: UUID,
    body: DriverDetailsRequest,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Change the license data of a DRIVER account."""
    return await account_service.update_driver_details(current_user, account_id, body)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> None:
    """Logically delete an account."""
    await account_service.delete_account(current_user, account_id)


@router.post("/{account_id}/restore", response_model=AccountResponse)
async def restore_account(
    account_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Restore a logically deleted account."""
    return await account_service.restore_account(current_user, account_id)
