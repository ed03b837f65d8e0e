"""Account repository."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from muebleria_api.models.domain.account import AccountStatus
from muebleria_api.models.domain.role import Role
from muebleria_api.models.orm.account import AccountORM
from muebleria_api.models.orm.driver_detail import DriverDetailORM
from muebleria_api.repositories.base import BaseRepository
from muebleria_api.utils.validation import escape_like_wildcards


class AccountRepository(BaseRepository[AccountORM]):
    """Repository for staff account operations.

    Lookups used for authentication always load the access rules eagerly:
    an account without rules is denied, so a partial load would lock it out.
    """

    model = AccountORM

    async def get_with_rules(self, account_id: UUID) -> AccountORM | None:
        """Get an account with its access rules loaded.

        Args:
            account_id: Account UUID

        Returns:
            AccountORM or None if not found
        """
        result = await self.session.execute(
            select(AccountORM)
            .options(selectinload(AccountORM.access_rules))
            .where(AccountORM.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> AccountORM | None:
        """Get an account by username with its access rules loaded.

        Args:
            username: Login name

        Returns:
            AccountORM or None if not found
        """
        result = await self.session.execute(
            select(AccountORM)
            .options(selectinload(AccountORM.access_rules))
            .where(AccountORM.username == username)
        )
        return result.scalar_one_or_none()

    async def exists_by_username(self, username: str) -> bool:
        """Check whether a username is already registered."""
        result = await self.session.execute(
            select(func.count()).select_from(AccountORM).where(AccountORM.username == username)
        )
        return result.scalar_one() > 0

    async def license_taken(self, license_number: str, exclude_account_id: UUID | None = None) -> bool:
        """Check whether a driver license number is registered to another account."""
        conditions = [DriverDetailORM.license_number == license_number]
        if exclude_account_id is not None:
            conditions.append(DriverDetailORM.account_id != exclude_account_id)
        result = await self.session.execute(
            select(func.count()).select_from(DriverDetailORM).where(*conditions)
        )
        return result.scalar_one() > 0

    async def list_accounts(
        self,
        exclude_id: UUID,
        roles: list[Role],
        status: AccountStatus = AccountStatus.ACTIVE,
        search: str | None = None,
        role: Role | None = None,
        branch_id: UUID | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[AccountORM], int]:
        """List accounts visible to an actor.

        Args:
            exclude_id: The actor's own account, never listed
            roles: Roles the actor is allowed to see
            status: Status filter
            search: Case-insensitive match on username, names or email
            role: Optional single-role filter
            branch_id: Optional managed-branch filter
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (accounts, total count)
        """
        if not roles:
            return [], 0

        conditions = [AccountORM.id != exclude_id, AccountORM.role.in_(roles)]

        if status == AccountStatus.DELETED:
            conditions.append(AccountORM.is_deleted.is_(True))
        elif status == AccountStatus.INACTIVE:
            conditions.append(AccountORM.is_deleted.is_(False))
            conditions.append(AccountORM.is_active.is_(False))
        elif status == AccountStatus.ALL:
            conditions.append(AccountORM.is_deleted.is_(False))
        else:
            conditions.append(AccountORM.is_deleted.is_(False))
            conditions.append(AccountORM.is_active.is_(True))

        if search:
            pattern = f"%{escape_like_wildcards(search.lower())}%"
            conditions.append(
                or_(
                    func.lower(AccountORM.username).like(pattern, escape="\\"),
                    func.lower(AccountORM.first_name).like(pattern, escape="\\"),
                    func.lower(AccountORM.last_name).like(pattern, escape="\\"),
                    func.lower(AccountORM.email).like(pattern, escape="\\"),
                )
            )

        if role is not None:
            conditions.append(AccountORM.role == role)

        if branch_id is not None:
            conditions.append(AccountORM.managed_branch_id == branch_id)

        total_result = await self.session.execute(
            select(func.count()).select_from(AccountORM).where(*conditions)
        )
        total = total_result.scalar_one()

        result = await self.session.execute(
            select(AccountORM)
            .where(*conditions)
            .order_by(AccountORM.username)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def update_password(
        self,
        account: AccountORM,
        password_hash: str,
        updated_by_id: UUID,
    ) -> AccountORM:
        """Replace an account's password.

        Moving ``password_changed_at`` forward invalidates every token issued
        before this call.

        Args:
            account: Account to update
            password_hash: New hashed password
            updated_by_id: Account performing the change

        Returns:
            Updated AccountORM
        """
        account.password_hash = password_hash
        account.password_changed_at = datetime.now(timezone.utc)
        account.updated_by_id = updated_by_id
        await self.session.flush()
        return account

    async def soft_delete(self, account: AccountORM, deleted_by_id: UUID) -> AccountORM:
        """Mark an account as deleted and deactivate it."""
        account.is_deleted = True
        account.is_active = False
        account.deleted_at = datetime.now(timezone.utc)
        account.deleted_by_id = deleted_by_id
        account.updated_by_id = deleted_by_id
        await self.session.flush()
        return account

    async def restore(self, account: AccountORM, restored_by_id: UUID) -> AccountORM:
        """Undo a logical deletion and reactivate the account."""
        account.is_deleted = False
        account.is_active = True
        account.deleted_at = None
        account.deleted_by_id = None
        account.updated_by_id = restored_by_id
        await self.session.flush()
        return account
