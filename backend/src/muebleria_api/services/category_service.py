"""Product category service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.exceptions import CategoryNameTakenError, CategoryNotFoundError
from muebleria_api.models.domain.account import Account
from muebleria_api.models.dto.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from muebleria_api.models.orm.category import CategoryORM
from muebleria_api.repositories.category_repository import CategoryRepository
from muebleria_api.utils.security_events import SecurityEventType, log_security_event


class CategoryService:
    """Service for product categories. Deleted categories are not found."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.category_repo = CategoryRepository(session)

    async def _get_active(self, category_id: UUID) -> CategoryORM:
        category = await self.category_repo.get_by_id(category_id)
        if category is None or category.is_deleted:
            raise CategoryNotFoundError(category_id)
        return category

    async def create_category(self, actor: Account, data: CategoryCreate) -> CategoryResponse:
        """Create a category.

        Raises:
            CategoryNameTakenError: If the name is in use, ignoring case
        """
        if await self.category_repo.name_taken(data.name):
            raise CategoryNameTakenError(data.name)

        category = await self.category_repo.add(
            CategoryORM(
                name=data.name,
                created_by_id=actor.id,
                updated_by_id=actor.id,
                is_deleted=False,
            )
        )

        log_security_event(
            SecurityEventType.CATEGORY_CREATED,
            account_id=actor.id,
            username=actor.username,
            details={"category_id": str(category.id), "name": category.name},
        )

        return CategoryResponse.model_validate(category)

    async def get_category(self, category_id: UUID) -> CategoryResponse:
        """Get a category that is not deleted."""
        return CategoryResponse.model_validate(await self._get_active(category_id))

    async def list_categories(self, page: int = 1, page_size: int = 10) -> CategoryListResponse:
        """List categories that are not deleted, ordered by name."""
        categories, total = await self.category_repo.list_active(
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return CategoryListResponse(
            items=[CategoryResponse.model_validate(c) for c in categories],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def update_category(self, actor: Account, category_id: UUID, data: CategoryUpdate) -> CategoryResponse:
        """Rename a category.

        Raises:
            CategoryNotFoundError: If missing or deleted
            CategoryNameTakenError: If another category uses the name, ignoring case
        """
        category = await self._get_active(category_id)
        if await self.category_repo.name_taken(data.name, exclude_id=category_id):
            raise CategoryNameTakenError(data.name)

        old_name = category.name
        category.name = data.name
        category.updated_by_id = actor.id
        await self.category_repo.flush()

        log_security_event(
            SecurityEventType.CATEGORY_UPDATED,
            account_id=actor.id,
            username=actor.username,
            details={"category_id": str(category_id), "name": {"old": old_name, "new": data.name}},
        )

        return CategoryResponse.model_validate(category)

    async def delete_category(self, actor: Account, category_id: UUID) -> None:
        """Logically delete a category.

        Raises:
            CategoryNotFoundError: If missing or already deleted
        """
        category = await self._get_active(category_id)
        await self.category_repo.soft_delete(category, actor.id)

        log_security_event(
            SecurityEventType.CATEGORY_DELETED,
            account_id=actor.id,
            username=actor.username,
            details={"category_id": str(category_id)},
        )
