"""Access rule (work schedule) service."""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.config import get_settings
from muebleria_api.exceptions import (
    AccessRuleConflictError,
    AccessRuleNotFoundError,
    AccountNotFoundError,
    AuthorizationDeniedError,
    ValidationError,
)
from muebleria_api.models.domain.account import Account
from muebleria_api.models.dto.access_rule import (
    AccessRuleCreate,
    AccessRuleListResponse,
    AccessRuleResponse,
    AccessRuleUpdate,
)
from muebleria_api.models.orm.access_rule import AccessRuleORM
from muebleria_api.models.orm.account import AccountORM
from muebleria_api.repositories.access_rule_repository import AccessRuleRepository
from muebleria_api.repositories.account_repository import AccountRepository
from muebleria_api.security import hierarchy
from muebleria_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


def build_rule(data: AccessRuleCreate, actor_id: UUID, account_id: UUID | None = None) -> AccessRuleORM:
    """Create an unsaved rule row from a request, applying the default timezone."""
    return AccessRuleORM(
        account_id=account_id,
        day_of_week=data.day_of_week,
        start_time=data.start_time,
        end_time=data.end_time,
        timezone=data.timezone or get_settings().default_access_timezone,
        is_active=data.is_active,
        created_by_id=actor_id,
        updated_by_id=actor_id,
    )


def ensure_unique_days(rules: Iterable[AccessRuleCreate], account_id: UUID | None = None) -> None:
    """Reject a batch of rules that names the same day twice.

    Raises:
        AccessRuleConflictError: If a day repeats
    """
    seen = set()
    for rule in rules:
        if rule.day_of_week in seen:
            raise AccessRuleConflictError(account_id, rule.day_of_week.value)
        seen.add(rule.day_of_week)


class AccessRuleService:
    """Service for managing the access windows of accounts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.rule_repo = AccessRuleRepository(session)
        self.account_repo = AccountRepository(session)

    def _ensure_can_manage(self, actor: Account, subject) -> None:
        if not hierarchy.can_manage_schedule(actor, subject):
            log_security_event(
                SecurityEventType.AUTHORIZATION_DENIED,
                account_id=actor.id,
                username=actor.username,
                target_account_id=subject.id,
                details={"action": "manage_schedule"},
                success=False,
            )
            raise AuthorizationDeniedError("You are not allowed to manage this account's schedule")

    async def _get_owner(self, account_id: UUID) -> AccountORM:
        account = await self.account_repo.get_by_id(account_id)
        if account is None or account.is_deleted:
            raise AccountNotFoundError(account_id)
        return account

    async def _get_rule(self, account_id: UUID, rule_id: UUID) -> AccessRuleORM:
        rule = await self.rule_repo.get_with_account(rule_id)
        if rule is None or rule.account_id != account_id or rule.account.is_deleted:
            raise AccessRuleNotFoundError(rule_id)
        return rule

    async def create_rule(
        self,
        actor: Account,
        account_id: UUID,
        data: AccessRuleCreate,
    ) -> AccessRuleResponse:
        """Add an access window to an account.

        Args:
            actor: Authenticated account
            account_id: Account receiving the rule
            data: Rule data

        Returns:
            Created rule

        Raises:
            AccountNotFoundError: If the account does not exist
            ValidationError: If the account bypasses access rules
            AuthorizationDeniedError: If the actor cannot manage the account's schedule
            AccessRuleConflictError: If the account already has a rule for that day
        """
        account = await self._get_owner(account_id)

        if account.bypass_access_rules:
            raise ValidationError(
                "Cannot assign access rules to an account that bypasses access rules"
            )

        self._ensure_can_manage(actor, account)

        existing = await self.rule_repo.get_by_account_and_day(account_id, data.day_of_week)
        if existing is not None:
            raise AccessRuleConflictError(account_id, data.day_of_week.value)

        rule = await self.rule_repo.add(build_rule(data, actor.id, account_id))

        log_security_event(
            SecurityEventType.ACCESS_RULE_CREATED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
            details={"rule_id": str(rule.id), "day_of_week": data.day_of_week.value},
        )

        return AccessRuleResponse.model_validate(rule)

    async def list_rules(self, actor: Account, account_id: UUID) -> AccessRuleListResponse:
        """List the access windows of an account, Monday first.

        Raises:
            AccountNotFoundError: If the account does not exist
            AuthorizationDeniedError: If the actor cannot manage the account's schedule
        """
        account = await self._get_owner(account_id)
        self._ensure_can_manage(actor, account)

        rules = await self.rule_repo.get_by_account(account_id)
        items = [AccessRuleResponse.model_validate(rule) for rule in rules]
        return AccessRuleListResponse(items=items, total=len(items))

    async def update_rule(
        self,
        actor: Account,
        account_id: UUID,
        rule_id: UUID,
        data: AccessRuleUpdate,
    ) -> AccessRuleResponse:
        """Update an access window. Only provided fields change.

        Args:
            actor: Authenticated account
            account_id: Account owning the rule
            rule_id: Rule UUID
            data: Fields to change

        Returns:
            Updated rule

        Raises:
            AccessRuleNotFoundError: If the rule does not exist for this account
            AuthorizationDeniedError: If the actor cannot manage the owner's schedule
            AccessRuleConflictError: If moving the rule to a day that already has one
            ValidationError: If the resulting window ends before it starts
        """
        rule = await self._get_rule(account_id, rule_id)
        self._ensure_can_manage(actor, rule.account)

        if data.day_of_week is not None and data.day_of_week != rule.day_of_week:
            existing = await self.rule_repo.get_by_account_and_day(account_id, data.day_of_week)
            if existing is not None and existing.id != rule.id:
                raise AccessRuleConflictError(account_id, data.day_of_week.value)

        start_time = data.start_time if data.start_time is not None else rule.start_time
        end_time = data.end_time if data.end_time is not None else rule.end_time
        if end_time < start_time:
            raise ValidationError("end_time must not be earlier than start_time")

        changes = {}
        for field in ("day_of_week", "start_time", "end_time", "timezone", "is_active"):
            value = getattr(data, field)
            if value is not None and value != getattr(rule, field):
                setattr(rule, field, value)
                changes[field] = str(value)
        rule.updated_by_id = actor.id
        await self.rule_repo.flush()

        log_security_event(
            SecurityEventType.ACCESS_RULE_UPDATED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
            details={"rule_id": str(rule.id), "changes": changes},
        )

        return AccessRuleResponse.model_validate(rule)

    async def delete_rule(self, actor: Account, account_id: UUID, rule_id: UUID) -> None:
        """Delete an access window.

        Removing the last rule of an account that does not bypass access
        rules locks that account out until a new rule is added.

        Raises:
            AccessRuleNotFoundError: If the rule does not exist for this account
            AuthorizationDeniedError: If the actor cannot manage the owner's schedule
        """
        rule = await self._get_rule(account_id, rule_id)
        self._ensure_can_manage(actor, rule.account)

        day = rule.day_of_week
        await self.rule_repo.delete(rule)

        log_security_event(
            SecurityEventType.ACCESS_RULE_DELETED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
            details={"rule_id": str(rule_id), "day_of_week": day.value},
        )
