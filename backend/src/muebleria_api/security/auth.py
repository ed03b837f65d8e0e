"""Request authentication and authorization dependencies."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.database import get_db
from muebleria_api.exceptions import (
    AccessWindowDeniedError,
    AuthenticationError,
    AuthorizationDeniedError,
    StaleCredentialError,
)
from muebleria_api.models.domain.account import Account
from muebleria_api.models.domain.role import Role
from muebleria_api.repositories.account_repository import AccountRepository
from muebleria_api.security import access_window
from muebleria_api.security.tokens import decode_token, is_token_still_valid
from muebleria_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

MANAGER_ROLES = frozenset({Role.DEVELOPER, Role.ADMIN})


def utcnow() -> datetime:
    """Current instant used by the request gate."""
    return datetime.now(timezone.utc)


def get_account_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccountRepository:
    """Get account repository dependency."""
    return AccountRepository(db)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    repository: Annotated[AccountRepository, Depends(get_account_repository)],
) -> Account:
    """Authenticate the request and enforce the account's access windows.

    The account is re-read on every request, so password changes, deactivation
    and schedule edits take effect immediately.

    Args:
        request: Incoming request (for audit logging)
        credentials: HTTP Bearer credentials
        repository: Account repository

    Returns:
        Account domain model with its access rules

    Raises:
        AuthenticationError: If the token is missing, invalid or stale, or the
            account no longer exists or is inactive
        AccessWindowDeniedError: If no access window admits the current time
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    claims = decode_token(credentials.credentials)

    account = await repository.get_with_rules(claims.subject)
    if account is None or account.is_deleted or not account.is_active:
        raise AuthenticationError("Invalid or expired token")

    ip_address = request.client.host if request.client else None

    if not is_token_still_valid(claims.issued_at, account.password_changed_at):
        log_security_event(
            SecurityEventType.STALE_TOKEN,
            account_id=account.id,
            username=account.username,
            ip_address=ip_address,
            details={"path": request.url.path},
            success=False,
        )
        raise StaleCredentialError()

    decision = access_window.evaluate(account, utcnow())
    if not decision:
        log_security_event(
            SecurityEventType.ACCESS_WINDOW_DENIED,
            account_id=account.id,
            username=account.username,
            ip_address=ip_address,
            details={"path": request.url.path, "reason": str(decision.reason)},
            success=False,
        )
        raise AccessWindowDeniedError()

    return Account.model_validate(account)


async def require_manager(
    current_user: Annotated[Account, Depends(get_current_user)],
) -> Account:
    """Require the current user to hold an account-management role.

    Args:
        current_user: Current authenticated user

    Returns:
        Account if it may manage other accounts

    Raises:
        AuthorizationDeniedError: If the role cannot manage accounts
    """
    if current_user.role not in MANAGER_ROLES:
        logger.info("Account %s with role %s denied management access", current_user.id, current_user.role)
        raise AuthorizationDeniedError()
    return current_user


def require_roles(*roles: Role) -> Callable:
    """Build a dependency that admits only accounts holding one of ``roles``.

    Args:
        roles: Roles allowed through

    Returns:
        FastAPI dependency returning the current account
    """
    allowed = frozenset(roles)

    async def dependency(
        current_user: Annotated[Account, Depends(get_current_user)],
    ) -> Account:
        if current_user.role not in allowed:
            logger.info("Account %s with role %s denied access", current_user.id, current_user.role)
            raise AuthorizationDeniedError()
        return current_user

    return dependency
