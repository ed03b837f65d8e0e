"""Authentication service."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.config import get_settings
from muebleria_api.exceptions import AccountDisabledError, AccountLockedError, InvalidCredentialsError
from muebleria_api.models.domain.account import Account, sort_by_day
from muebleria_api.models.dto.access_rule import AccessRuleResponse
from muebleria_api.models.dto.account import DriverDetailsResponse
from muebleria_api.models.dto.auth import LoginResponse, UserInfo
from muebleria_api.repositories.account_repository import AccountRepository
from muebleria_api.security import access_window
from muebleria_api.security.password import get_password_service
from muebleria_api.security.tokens import create_access_token
from muebleria_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


def build_user_info(account) -> UserInfo:
    """Build the own-account view from an ORM row or domain model."""
    first_name = account.first_name
    last_name = account.last_name
    full_name = " ".join(part for part in (first_name, last_name) if part) or None
    return UserInfo(
        id=account.id,
        username=account.username,
        role=account.role,
        full_name=full_name,
        first_name=first_name,
        last_name=last_name,
        email=account.email,
        phone=account.phone,
        managed_branch_id=account.managed_branch_id,
        driver_details=(
            DriverDetailsResponse.model_validate(account.driver_details)
            if account.driver_details is not None
            else None
        ),
        bypass_access_rules=account.bypass_access_rules,
        access_rules=[
            AccessRuleResponse.model_validate(rule)
            for rule in sort_by_day(account.access_rules)
        ],
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.account_repo = AccountRepository(session)
        self.password_service = get_password_service()

    async def authenticate(
        self,
        username: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
        now: datetime | None = None,
    ) -> LoginResponse:
        """Authenticate with username and password.

        Credentials are checked first, then the account state, then the
        account's access windows. A schedule denial is reported as a locked
        account with its reason, never as bad credentials.

        Args:
            username: Login name
            password: Plain text password
            ip_address: Client IP address
            user_agent: Client user agent
            now: Evaluation instant for the access windows (defaults to now)

        Returns:
            LoginResponse with the access token and account info

        Raises:
            InvalidCredentialsError: Unknown user, deleted user or wrong password
            AccountDisabledError: The account is inactive
            AccountLockedError: No access window admits the current time
        """
        username = username.strip()
        account = await self.account_repo.get_by_username(username)

        if account is None or account.is_deleted:
            log_security_event(
                SecurityEventType.LOGIN_FAILED,
                username=username,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "unknown_user"},
                success=False,
            )
            raise InvalidCredentialsError()

        if not self.password_service.verify_password(password, account.password_hash):
            log_security_event(
                SecurityEventType.LOGIN_FAILED,
                account_id=account.id,
                username=username,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "invalid_password"},
                success=False,
            )
            raise InvalidCredentialsError()

        if not account.is_active:
            log_security_event(
                SecurityEventType.LOGIN_FAILED,
                account_id=account.id,
                username=username,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "account_disabled"},
                success=False,
            )
            raise AccountDisabledError()

        decision = access_window.evaluate(account, now)
        if not decision:
            log_security_event(
                SecurityEventType.LOGIN_LOCKED,
                account_id=account.id,
                username=username,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": str(decision.reason)},
                success=False,
            )
            raise AccountLockedError(str(decision.reason))

        token, expires_at = create_access_token(
            account_id=account.id,
            username=account.username,
            role=account.role,
            password_changed_at=account.password_changed_at,
        )

        log_security_event(
            SecurityEventType.LOGIN_SUCCESS,
            account_id=account.id,
            username=username,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        return LoginResponse(
            access_token=token,
            expires_in=get_settings().jwt_expiration_minutes * 60,
            expires_at=expires_at,
            user=build_user_info(account),
        )

    def get_me(self, account: Account) -> UserInfo:
        """Get the own-account view of the authenticated user."""
        return build_user_info(account)
