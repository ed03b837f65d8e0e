"""Access rule repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from muebleria_api.models.domain.account import DayOfWeek, sort_by_day
from muebleria_api.models.orm.access_rule import AccessRuleORM
from muebleria_api.repositories.base import BaseRepository


class AccessRuleRepository(BaseRepository[AccessRuleORM]):
    """Repository for access rule operations."""

    model = AccessRuleORM

    async def get_with_account(self, rule_id: UUID) -> AccessRuleORM | None:
        """Get a rule together with its owning account.

        Args:
            rule_id: Rule UUID

        Returns:
            AccessRuleORM or None if not found
        """
        result = await self.session.execute(
            select(AccessRuleORM)
            .options(selectinload(AccessRuleORM.account))
            .where(AccessRuleORM.id == rule_id)
        )
        return result.scalar_one_or_none()

    async def get_by_account(self, account_id: UUID) -> list[AccessRuleORM]:
        """Get all rules of an account.

        Args:
            account_id: Account UUID

        Returns:
            List of AccessRuleORM
        """
        result = await self.session.execute(
            select(AccessRuleORM).where(AccessRuleORM.account_id == account_id)
        )
        return sort_by_day(result.scalars().all())

    async def get_by_account_and_day(
        self, account_id: UUID, day_of_week: DayOfWeek
    ) -> AccessRuleORM | None:
        """Get the rule of an account for one day, if any.

        Args:
            account_id: Account UUID
            day_of_week: Day to look up

        Returns:
            AccessRuleORM or None
        """
        result = await self.session.execute(
            select(AccessRuleORM)
            .where(AccessRuleORM.account_id == account_id)
            .where(AccessRuleORM.day_of_week == day_of_week)
        )
        return result.scalar_one_or_none()
