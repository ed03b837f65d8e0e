"""Category repository."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select

from muebleria_api.models.orm.category import CategoryORM
from muebleria_api.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[CategoryORM]):
    """Repository for product category operations."""

    model = CategoryORM

    async def name_taken(self, name: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another category uses ``name`` (case-insensitive)."""
        conditions = [func.lower(CategoryORM.name) == name.lower()]
        if exclude_id is not None:
            conditions.append(CategoryORM.id != exclude_id)
        result = await self.session.execute(
            select(func.count()).select_from(CategoryORM).where(*conditions)
        )
        return result.scalar_one() > 0

    async def list_active(self, offset: int = 0, limit: int = 10) -> tuple[list[CategoryORM], int]:
        """List categories that are not deleted, ordered by name.

        Returns:
            Tuple of (categories, total count)
        """
        condition = CategoryORM.is_deleted.is_(False)
        total_result = await self.session.execute(
            select(func.count()).select_from(CategoryORM).where(condition)
        )
        result = await self.session.execute(
            select(CategoryORM)
            .where(condition)
            .order_by(CategoryORM.name)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_result.scalar_one()

    async def soft_delete(self, category: CategoryORM, deleted_by_id: UUID) -> CategoryORM:
        """Mark a category as deleted."""
        category.is_deleted = True
        category.deleted_at = datetime.now(timezone.utc)
        category.deleted_by_id = deleted_by_id
        category.updated_by_id = deleted_by_id
        await self.session.flush()
        return category
