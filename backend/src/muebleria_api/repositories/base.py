"""Base repository with common database operations."""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations."""

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            id: Record UUID

        Returns:
            Record or None if not found
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def add(self, instance: T) -> T:
        """Persist a new or modified record.

        Args:
            instance: ORM instance

        Returns:
            The same instance, flushed
        """
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def flush(self) -> None:
        """Flush pending changes of tracked records."""
        await self.session.flush()

    async def delete(self, instance: T) -> None:
        """Delete a record.

        Args:
            instance: ORM instance to delete
        """
        await self.session.delete(instance)
        await self.session.flush()
