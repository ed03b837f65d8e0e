"""Branch repository."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, or_, select

from muebleria_api.models.domain.branch import BranchStatus
from muebleria_api.models.orm.branch import BranchORM
from muebleria_api.repositories.base import BaseRepository
from muebleria_api.utils.validation import escape_like_wildcards


class BranchRepository(BaseRepository[BranchORM]):
    """Repository for branch operations."""

    model = BranchORM

    async def name_taken(self, name: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another branch uses ``name`` (case-insensitive), deleted ones included."""
        return await self._taken(func.lower(BranchORM.name) == name.lower(), exclude_id)

    async def prefix_taken(self, order_prefix: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another branch uses ``order_prefix`` (case-insensitive), deleted ones included."""
        return await self._taken(func.lower(BranchORM.order_prefix) == order_prefix.lower(), exclude_id)

    async def _taken(self, condition, exclude_id: UUID | None) -> bool:
        conditions = [condition]
        if exclude_id is not None:
            conditions.append(BranchORM.id != exclude_id)
        result = await self.session.execute(
            select(func.count()).select_from(BranchORM).where(*conditions)
        )
        return result.scalar_one() > 0

    async def list_branches(
        self,
        status: BranchStatus = BranchStatus.ACTIVE,
        search: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[BranchORM], int]:
        """List branches ordered by name.

        Args:
            status: Status filter
            search: Case-insensitive match on name, neighborhood, city or state
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (branches, total count)
        """
        conditions = []
        if status == BranchStatus.ACTIVE:
            conditions.append(BranchORM.is_deleted.is_(False))
        elif status == BranchStatus.DELETED:
            conditions.append(BranchORM.is_deleted.is_(True))

        if search:
            pattern = f"%{escape_like_wildcards(search.lower())}%"
            conditions.append(
                or_(
                    func.lower(BranchORM.name).like(pattern, escape="\\"),
                    func.lower(BranchORM.neighborhood).like(pattern, escape="\\"),
                    func.lower(BranchORM.city).like(pattern, escape="\\"),
                    func.lower(BranchORM.state).like(pattern, escape="\\"),
                )
            )

        total_result = await self.session.execute(
            select(func.count()).select_from(BranchORM).where(*conditions)
        )
        total = total_result.scalar_one()

        result = await self.session.execute(
            select(BranchORM)
            .where(*conditions)
            .order_by(BranchORM.name)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_options(self) -> list[BranchORM]:
        """Get all branches that are not deleted, ordered by name."""
        result = await self.session.execute(
            select(BranchORM).where(BranchORM.is_deleted.is_(False)).order_by(BranchORM.name)
        )
        return list(result.scalars().all())

    async def soft_delete(self, branch: BranchORM, deleted_by_id: UUID) -> BranchORM:
        """Mark a branch as deleted."""
        branch.is_deleted = True
        branch.deleted_at = datetime.now(timezone.utc)
        branch.deleted_by_id = deleted_by_id
        branch.updated_by_id = deleted_by_id
        await self.session.flush()
        return branch

    async def restore(self, branch: BranchORM, restored_by_id: UUID) -> BranchORM:
        """Undo a logical deletion."""
        branch.is_deleted = False
        branch.deleted_at = None
        branch.deleted_by_id = None
        branch.updated_by_id = restored_by_id
        await self.session.flush()
        return branch
