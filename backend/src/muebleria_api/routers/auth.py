"""Authentication router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from muebleria_api.dependencies import get_account_service, get_auth_service
from muebleria_api.models.domain.account import Account
from muebleria_api.models.dto.auth import (
    LoginRequest,
    LoginResponse,
    OwnProfileUpdateRequest,
    PasswordChangeRequest,
    UserInfo,
)
from muebleria_api.security.auth import get_current_user
from muebleria_api.security.rate_limit import (
    API_DEFAULT_LIMIT,
    AUTH_LOGIN_LIMIT,
    AUTH_PASSWORD_CHANGE_LIMIT,
    get_real_client_ip,
    limiter,
)
from muebleria_api.services.account_service import AccountService
from muebleria_api.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(AUTH_LOGIN_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """Log in with username and password.

    Returns 401 for bad credentials, 403 when the account is disabled or
    when its work schedule does not allow access right now.
    """
    return await auth_service.authenticate(
        username=body.username,
        password=body.password,
        ip_address=get_real_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )


@router.get("/me", response_model=UserInfo)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_current_user_info(
    request: Request,
    current_user: Annotated[Account, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserInfo:
    """Get the authenticated account with its work schedule."""
    return auth_service.get_me(current_user)


@router.put("/me/password")
@limiter.limit(AUTH_PASSWORD_CHANGE_LIMIT)
async def change_password(
    request: Request,
    body: PasswordChangeRequest,
    current_user: Annotated[Account, Depends(get_current_user)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> dict:
    """Change own password. Existing sessions must log in again."""
    await account_service.change_own_password(
        current_user,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return {"success": True, "message": "Password changed, please log in again"}


@router.patch("/me/profile", response_model=UserInfo)
@limiter.limit(API_DEFAULT_LIMIT)
async def update_own_profile(
    request: Request,
    body: OwnProfileUpdateRequest,
    current_user: Annotated[Account, Depends(get_current_user)],
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> UserInfo:
    """Update own email and phone."""
    return await account_service.update_own_profile(current_user, body)
