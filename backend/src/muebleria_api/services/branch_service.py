"""Store branch service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.exceptions import (
    AuthorizationDeniedError,
    BranchConflictError,
    BranchNotFoundError,
    ValidationError,
)
from muebleria_api.models.domain.account import Account
from muebleria_api.models.domain.branch import BranchStatus
from muebleria_api.models.dto.branch import (
    BranchCreate,
    BranchListResponse,
    BranchOption,
    BranchResponse,
    BranchSummary,
    BranchUpdate,
)
from muebleria_api.models.orm.branch import BranchORM
from muebleria_api.repositories.branch_repository import BranchRepository
from muebleria_api.security import hierarchy
from muebleria_api.utils.security_events import SecurityEventType, log_security_event
from muebleria_api.utils.validation import sanitize_search


class BranchService:
    """Service for store branches.

    Route dependencies decide which roles reach each operation. Logically
    deleted branches stay visible only to the top role.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.branch_repo = BranchRepository(session)

    async def _ensure_unique(self, name: str | None, order_prefix: str | None, exclude_id: UUID | None = None) -> None:
        if name is not None and await self.branch_repo.name_taken(name, exclude_id):
            raise BranchConflictError("name", name)
        if order_prefix is not None and await self.branch_repo.prefix_taken(order_prefix, exclude_id):
            raise BranchConflictError("order_prefix", order_prefix)

    async def create_branch(self, actor: Account, data: BranchCreate) -> BranchResponse:
        """Create a branch.

        Raises:
            BranchConflictError: If the name or order prefix is already in use
        """
        await self._ensure_unique(data.name, data.order_prefix)

        branch = BranchORM(
            **data.model_dump(),
            created_by_id=actor.id,
            updated_by_id=actor.id,
            is_deleted=False,
        )
        branch = await self.branch_repo.add(branch)

        log_security_event(
            SecurityEventType.BRANCH_CREATED,
            account_id=actor.id,
            username=actor.username,
            details={"branch_id": str(branch.id), "name": branch.name},
        )

        return BranchResponse.model_validate(branch)

    async def get_branch(self, actor: Account, branch_id: UUID) -> BranchResponse:
        """Get a branch. Deleted branches are 404 for everyone but the top role.

        Raises:
            BranchNotFoundError: If missing or hidden
        """
        branch = await self.branch_repo.get_by_id(branch_id)
        if branch is None or (branch.is_deleted and not hierarchy.can_view_deleted(actor.role)):
            raise BranchNotFoundError(branch_id)
        return BranchResponse.model_validate(branch)

    async def list_branches(
        self,
        actor: Account,
        status: BranchStatus = BranchStatus.ACTIVE,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> BranchListResponse:
        """List branches ordered by name.

        Raises:
            AuthorizationDeniedError: If a non-top role asks for deleted branches
        """
        if status != BranchStatus.ACTIVE and not hierarchy.can_view_deleted(actor.role):
            raise AuthorizationDeniedError("You are not allowed to list deleted branches")

        branches, total = await self.branch_repo.list_branches(
            status=status,
            search=sanitize_search(search),
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return BranchListResponse(
            items=[BranchSummary.model_validate(b) for b in branches],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def list_options(self) -> list[BranchOption]:
        """Id and name of every branch that is not deleted."""
        return [BranchOption.model_validate(b) for b in await self.branch_repo.list_options()]

    async def update_branch(self, actor: Account, branch_id: UUID, data: BranchUpdate) -> BranchResponse:
        """Update the provided fields of a branch.

        Raises:
            BranchNotFoundError: If the branch does not exist
            AuthorizationDeniedError: If the branch is deleted
            BranchConflictError: If the new name or order prefix is taken by another branch
        """
        branch = await self.branch_repo.get_by_id(branch_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)
        if branch.is_deleted:
            raise AuthorizationDeniedError("Deleted branches cannot be modified")

        changes = data.model_dump(exclude_unset=True)
        await self._ensure_unique(changes.get("name"), changes.get("order_prefix"), branch_id)

        for field, value in changes.items():
            setattr(branch, field, value)
        branch.updated_by_id = actor.id
        await self.branch_repo.flush()

        log_security_event(
            SecurityEventType.BRANCH_UPDATED,
            account_id=actor.id,
            username=actor.username,
            details={"branch_id": str(branch_id), "fields": sorted(changes)},
        )

        return BranchResponse.model_validate(branch)

    async def delete_branch(self, actor: Account, branch_id: UUID) -> None:
        """Logically delete a branch.

        Raises:
            BranchNotFoundError: If the branch does not exist or is already deleted
        """
        branch = await self.branch_repo.get_by_id(branch_id)
        if branch is None or branch.is_deleted:
            raise BranchNotFoundError(branch_id)

        await self.branch_repo.soft_delete(branch, actor.id)

        log_security_event(
            SecurityEventType.BRANCH_DELETED,
            account_id=actor.id,
            username=actor.username,
            details={"branch_id": str(branch_id)},
        )

    async def restore_branch(self, actor: Account, branch_id: UUID) -> BranchResponse:
        """Restore a logically deleted branch.

        Raises:
            BranchNotFoundError: If the branch does not exist
            ValidationError: If the branch is not deleted
        """
        branch = await self.branch_repo.get_by_id(branch_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)
        if not branch.is_deleted:
            raise ValidationError("Branch is not deleted and cannot be restored")

        await self.branch_repo.restore(branch, actor.id)

        log_security_event(
            SecurityEventType.BRANCH_RESTORED,
            account_id=actor.id,
            username=actor.username,
            details={"branch_id": str(branch_id)},
        )

        return BranchResponse.model_validate(branch)
