"""Staff account management service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.exceptions import (
    AccountNotFoundError,
    AuthorizationDeniedError,
    BranchNotFoundError,
    DriverDetailsNotFoundError,
    LicenseNumberTakenError,
    UsernameTakenError,
    ValidationError,
)
from muebleria_api.models.domain.account import Account, AccountStatus, sort_by_day
from muebleria_api.models.domain.role import Role
from muebleria_api.models.dto.account import (
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    AccountSummary,
    AccountUpdate,
    DriverDetailsRequest,
    ProfileUpdateRequest,
)
from muebleria_api.models.dto.auth import OwnProfileUpdateRequest, UserInfo
from muebleria_api.models.orm.account import AccountORM
from muebleria_api.models.orm.base import utcnow
from muebleria_api.models.orm.branch import BranchORM
from muebleria_api.models.orm.driver_detail import DriverDetailORM
from muebleria_api.repositories.account_repository import AccountRepository
from muebleria_api.repositories.branch_repository import BranchRepository
from muebleria_api.security import hierarchy
from muebleria_api.security.password import get_password_service
from muebleria_api.services.access_rule_service import build_rule, ensure_unique_days
from muebleria_api.services.auth_service import build_user_info
from muebleria_api.utils.security_events import SecurityEventType, log_security_event
from muebleria_api.utils.validation import sanitize_search

logger = logging.getLogger(__name__)


def _to_response(account: AccountORM) -> AccountResponse:
    response = AccountResponse.model_validate(account)
    if account.managed_branch is not None:
        response.managed_branch_name = account.managed_branch.name
    response.access_rules = sort_by_day(response.access_rules)
    return response


class AccountService:
    """Service for staff account management.

    Every operation takes the authenticated actor and checks the role
    hierarchy before touching the target account.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.account_repo = AccountRepository(session)
        self.branch_repo = BranchRepository(session)
        self.password_service = get_password_service()

    def _deny(self, actor: Account, target_id: UUID | None, action: str, message: str) -> AuthorizationDeniedError:
        log_security_event(
            SecurityEventType.AUTHORIZATION_DENIED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=target_id,
            details={"action": action},
            success=False,
        )
        return AuthorizationDeniedError(message)

    def _validate_new_password(self, password: str) -> None:
        is_valid, errors = self.password_service.validate_password_strength(password)
        if not is_valid:
            raise ValidationError("; ".join(errors), {"errors": errors})

    async def _get_modifiable(self, actor: Account, account_id: UUID, action: str) -> AccountORM:
        """Load a target for a management write, with its rules."""
        account = await self.account_repo.get_with_rules(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        if account.is_deleted:
            raise self._deny(actor, account_id, action, "Deleted accounts cannot be modified")
        if not hierarchy.can_update(actor, account):
            raise self._deny(actor, account_id, action, "You are not allowed to modify this account")
        return account

    async def _resolve_branch(self, branch_id: UUID) -> BranchORM:
        branch = await self.branch_repo.get_by_id(branch_id)
        if branch is None or branch.is_deleted:
            raise BranchNotFoundError(branch_id)
        return branch

    async def _apply_driver_details(
        self, account: AccountORM, data: DriverDetailsRequest, actor_id: UUID
    ) -> None:
        """Create or update the account's driver details. The license number must be unused."""
        if await self.account_repo.license_taken(data.license_number, exclude_account_id=account.id):
            raise LicenseNumberTakenError()

        details = account.driver_details
        if details is None:
            account.driver_details = DriverDetailORM(
                license_number=data.license_number,
                license_expiration_date=data.license_expiration_date,
                created_by_id=actor_id,
                updated_by_id=actor_id,
            )
            return

        details.license_number = data.license_number
        if "license_expiration_date" in data.model_fields_set:
            details.license_expiration_date = data.license_expiration_date
        details.updated_by_id = actor_id

    async def create_account(self, actor: Account, data: AccountCreate) -> AccountResponse:
        """Create a staff account.

        Args:
            actor: Authenticated account
            data: Account data with optional initial access rules

        Returns:
            Created account

        Raises:
            AuthorizationDeniedError: If the actor cannot create the requested role
            ValidationError: If bypass and rules are combined, a DRIVER lacks a
                license or the password is weak
            UsernameTakenError: If the username is already registered
            LicenseNumberTakenError: If the license number belongs to another account
            BranchNotFoundError: If the managed branch is missing or deleted
            AccessRuleConflictError: If two initial rules share a day
        """
        if not hierarchy.can_create(actor.role, data.role):
            raise self._deny(
                actor, None, "create_account", f"You are not allowed to create accounts with role {data.role}"
            )

        if data.bypass_access_rules and data.access_rules:
            raise ValidationError(
                "Cannot assign access rules to an account that bypasses access rules"
            )

        if data.role == Role.DRIVER and data.driver_details is None:
            raise ValidationError("License number is required for DRIVER accounts")
        if data.role != Role.DRIVER and data.driver_details is not None:
            raise ValidationError("Driver details only apply to DRIVER accounts")

        self._validate_new_password(data.password)

        if await self.account_repo.exists_by_username(data.username):
            raise UsernameTakenError(data.username)

        ensure_unique_days(data.access_rules)

        branch = None
        if data.managed_branch_id is not None:
            branch = await self._resolve_branch(data.managed_branch_id)

        account = AccountORM(
            username=data.username,
            password_hash=self.password_service.hash_password(data.password),
            role=data.role,
            is_active=data.is_active,
            bypass_access_rules=data.bypass_access_rules,
            password_changed_at=utcnow(),
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            managed_branch=branch,
            managed_branch_id=branch.id if branch is not None else None,
            driver_details=None,
            created_by_id=actor.id,
            updated_by_id=actor.id,
            is_deleted=False,
            deleted_at=None,
            deleted_by_id=None,
            access_rules=[build_rule(rule, actor.id) for rule in data.access_rules],
        )
        if data.driver_details is not None:
            await self._apply_driver_details(account, data.driver_details, actor.id)
        account = await self.account_repo.add(account)

        log_security_event(
            SecurityEventType.ACCOUNT_CREATED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account.id,
            details={"role": data.role.value, "rules": len(data.access_rules)},
        )

        return _to_response(account)

    async def get_account(self, actor: Account, account_id: UUID) -> AccountResponse:
        """Get an account visible to the actor.

        Raises:
            AccountNotFoundError: If missing, or deleted and the actor may not see deleted accounts
            AuthorizationDeniedError: If the actor may not read the account
        """
        account = await self.account_repo.get_with_rules(account_id)
        return self._readable(actor, account, account_id)

    async def get_by_username(self, actor: Account, username: str) -> AccountResponse:
        """Get an account by username, with the same visibility rules as ``get_account``."""
        account = await self.account_repo.get_by_username(username.strip())
        return self._readable(actor, account, username)

    def _readable(self, actor: Account, account: AccountORM | None, key: UUID | str) -> AccountResponse:
        if account is None:
            raise AccountNotFoundError(key)
        if account.is_deleted and not hierarchy.can_view_deleted(actor.role):
            raise AccountNotFoundError(key)
        if not hierarchy.can_read(actor, account):
            raise self._deny(actor, account.id, "read_account", "You are not allowed to view this account")
        return _to_response(account)

    async def is_username_taken(self, username: str) -> bool:
        """Check whether a username is already registered, deleted accounts included."""
        return await self.account_repo.exists_by_username(username.strip())

    async def list_accounts(
        self,
        actor: Account,
        status: AccountStatus = AccountStatus.ACTIVE,
        search: str | None = None,
        role: Role | None = None,
        branch_id: UUID | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> AccountListResponse:
        """List the accounts the actor may manage.

        The actor never sees itself. DEVELOPER sees every other role, ADMIN
        only lower levels, everyone else nothing.

        Raises:
            AuthorizationDeniedError: If a non-DEVELOPER asks for deleted accounts
        """
        if status == AccountStatus.DELETED and not hierarchy.can_view_deleted(actor.role):
            raise self._deny(actor, None, "list_deleted", "You are not allowed to list deleted accounts")

        offset = (page - 1) * page_size
        accounts, total = await self.account_repo.list_accounts(
            exclude_id=actor.id,
            roles=hierarchy.visible_roles(actor.role),
            status=status,
            search=sanitize_search(search),
            role=role,
            branch_id=branch_id,
            offset=offset,
            limit=page_size,
        )

        return AccountListResponse(
            items=[AccountSummary.model_validate(a) for a in accounts],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def update_account(self, actor: Account, account_id: UUID, data: AccountUpdate) -> AccountResponse:
        """Update an account's state, bypass flag, role, managed branch or driver details.

        Turning the bypass on clears the schedule. Turning it off requires a
        schedule: either rules already stored or rules sent in the same request.

        Args:
            actor: Authenticated account
            account_id: Target account UUID
            data: Fields to change

        Returns:
            Updated account

        Raises:
            AccountNotFoundError: If the account does not exist
            AuthorizationDeniedError: If the actor may not modify the account or assign the role
            ValidationError: If disabling the bypass would leave the account without a
                schedule, or a DRIVER would be left without a license
            LicenseNumberTakenError: If the license number belongs to another account
            BranchNotFoundError: If the managed branch is missing or deleted
            AccessRuleConflictError: If supplied rules share a day
        """
        account = await self._get_modifiable(actor, account_id, "update_account")
        changes: dict = {}
        new_role = data.role if data.role is not None else account.role

        if data.role is not None and data.role != account.role:
            if not hierarchy.can_change_role(actor.role) or not hierarchy.can_create(actor.role, data.role):
                raise self._deny(actor, account_id, "change_role", "You are not allowed to assign this role")

        if new_role == Role.DRIVER:
            if data.driver_details is None and account.driver_details is None:
                raise ValidationError("License number is required for DRIVER accounts")
        elif data.driver_details is not None:
            raise ValidationError("Driver details only apply to DRIVER accounts")

        if "managed_branch_id" in data.model_fields_set and data.managed_branch_id != account.managed_branch_id:
            branch = None
            if data.managed_branch_id is not None:
                branch = await self._resolve_branch(data.managed_branch_id)
            account.managed_branch = branch
            account.managed_branch_id = data.managed_branch_id
            changes["managed_branch_id"] = str(data.managed_branch_id) if data.managed_branch_id else None

        if data.driver_details is not None:
            await self._apply_driver_details(account, data.driver_details, actor.id)
            changes["driver_details"] = True

        if new_role != account.role:
            changes["role"] = {"old": account.role.value, "new": new_role.value}
            # Details belong to the DRIVER role only.
            if account.role == Role.DRIVER:
                account.driver_details = None
            account.role = new_role

        if data.is_active is not None and data.is_active != account.is_active:
            changes["is_active"] = data.is_active
            account.is_active = data.is_active

        new_rules = data.access_rules or []
        bypass = account.bypass_access_rules if data.bypass_access_rules is None else data.bypass_access_rules

        if new_rules and not (account.bypass_access_rules and not bypass):
            raise ValidationError(
                "Access rules can only be sent here when turning off the bypass; use the access rules endpoints"
            )

        if account.bypass_access_rules and not bypass:
            if not account.access_rules and not new_rules:
                raise ValidationError(
                    "Cannot restrict an account without access rules. Assign at least one access rule first."
                )
            ensure_unique_days(new_rules, account_id)
            account.access_rules.extend(build_rule(rule, actor.id, account_id) for rule in new_rules)
            account.bypass_access_rules = False
            changes["bypass_access_rules"] = False
        elif not account.bypass_access_rules and bypass:
            cleared = len(account.access_rules)
            account.access_rules.clear()
            account.bypass_access_rules = True
            changes["bypass_access_rules"] = True
            if cleared:
                log_security_event(
                    SecurityEventType.ACCESS_RULES_CLEARED,
                    account_id=actor.id,
                    username=actor.username,
                    target_account_id=account_id,
                    details={"count": cleared},
                )

        account.updated_by_id = actor.id
        await self.account_repo.flush()

        log_security_event(
            SecurityEventType.ACCOUNT_UPDATED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
            details={"changes": changes},
        )

        return _to_response(account)

    async def reset_password(self, actor: Account, account_id: UUID, new_password: str) -> None:
        """Set another account's password. Existing tokens of that account stop working.

        Raises:
            AccountNotFoundError: If the account does not exist
            AuthorizationDeniedError: If the account is deleted or the actor may not modify it
            ValidationError: If the password is too weak
        """
        account = await self._get_modifiable(actor, account_id, "reset_password")
        self._validate_new_password(new_password)

        await self.account_repo.update_password(
            account, self.password_service.hash_password(new_password), actor.id
        )

        log_security_event(
            SecurityEventType.PASSWORD_RESET,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
        )

    async def change_own_password(self, actor: Account, current_password: str, new_password: str) -> None:
        """Change the actor's own password. Every token issued so far stops working.

        Raises:
            AccountNotFoundError: If the actor's account vanished
            ValidationError: If the current password is wrong, the new one equals it, or is too weak
        """
        account = await self.account_repo.get_by_id(actor.id)
        if account is None:
            raise AccountNotFoundError(actor.id)

        if not self.password_service.verify_password(current_password, account.password_hash):
            log_security_event(
                SecurityEventType.PASSWORD_CHANGED,
                account_id=actor.id,
                username=actor.username,
                details={"reason": "invalid_current_password"},
                success=False,
            )
            raise ValidationError("Current password is incorrect")

        if current_password == new_password:
            raise ValidationError("New password must differ from the current password")

        self._validate_new_password(new_password)

        await self.account_repo.update_password(
            account, self.password_service.hash_password(new_password), actor.id
        )

        log_security_event(
            SecurityEventType.PASSWORD_CHANGED,
            account_id=actor.id,
            username=actor.username,
        )

    async def update_own_profile(self, actor: Account, data: OwnProfileUpdateRequest) -> UserInfo:
        """Update the actor's own contact data (email and phone only)."""
        account = await self.account_repo.get_with_rules(actor.id)
        if account is None:
            raise AccountNotFoundError(actor.id)

        for field in data.model_fields_set & {"email", "phone"}:
            setattr(account, field, getattr(data, field))
        account.updated_by_id = actor.id
        await self.account_repo.flush()

        return build_user_info(account)

    async def update_profile(self, actor: Account, account_id: UUID, data: ProfileUpdateRequest) -> AccountResponse:
        """Update another account's names and contact data.

        Raises:
            AccountNotFoundError: If the account does not exist
            AuthorizationDeniedError: If the account is deleted or the actor may not modify it
        """
        account = await self._get_modifiable(actor, account_id, "update_profile")

        for field in data.model_fields_set & {"first_name", "last_name", "email", "phone"}:
            setattr(account, field, getattr(data, field))
        account.updated_by_id = actor.id
        await self.account_repo.flush()

        log_security_event(
            SecurityEventType.ACCOUNT_UPDATED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
            details={"profile_fields": sorted(data.model_fields_set)},
        )

        return _to_response(account)

    async def update_driver_details(
        self, actor: Account, account_id: UUID, data: DriverDetailsRequest
    ) -> AccountResponse:
        """Change the license data of a DRIVER account.

        Raises:
            AccountNotFoundError: If the account does not exist
            AuthorizationDeniedError: If the account is deleted or the actor may not modify it
            ValidationError: If the account is not a DRIVER
            DriverDetailsNotFoundError: If the account has no driver details
            LicenseNumberTakenError: If the license number belongs to another account
        """
        account = await self._get_modifiable(actor, account_id, "update_driver_details")
        if account.role != Role.DRIVER:
            raise ValidationError("Account does not have the DRIVER role")
        if account.driver_details is None:
            raise DriverDetailsNotFoundError(account_id)

        await self._apply_driver_details(account, data, actor.id)
        account.updated_by_id = actor.id
        await self.account_repo.flush()

        log_security_event(
            SecurityEventType.DRIVER_DETAILS_UPDATED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
            details={"fields": sorted(data.model_fields_set)},
        )

        return _to_response(account)

    async def delete_account(self, actor: Account, account_id: UUID) -> None:
        """Logically delete and deactivate an account.

        Raises:
            AccountNotFoundError: If the account does not exist or is already deleted
            AuthorizationDeniedError: If the actor may not delete the account
        """
        account = await self.account_repo.get_by_id(account_id)
        if account is None or account.is_deleted:
            raise AccountNotFoundError(account_id)

        if not hierarchy.can_delete(actor, account):
            raise self._deny(actor, account_id, "delete_account", "You are not allowed to delete this account")

        await self.account_repo.soft_delete(account, actor.id)

        log_security_event(
            SecurityEventType.ACCOUNT_DELETED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
        )

    async def restore_account(self, actor: Account, account_id: UUID) -> AccountResponse:
        """Restore a logically deleted account and reactivate it.

        Raises:
            AccountNotFoundError: If the account does not exist
            ValidationError: If the account is not deleted
            AuthorizationDeniedError: If the actor may not restore the account
        """
        account = await self.account_repo.get_with_rules(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        if not account.is_deleted:
            raise ValidationError("Account is not deleted and cannot be restored")

        if not hierarchy.can_restore(actor, account):
            raise self._deny(actor, account_id, "restore_account", "You are not allowed to restore this account")

        await self.account_repo.restore(account, actor.id)

        log_security_event(
            SecurityEventType.ACCOUNT_RESTORED,
            account_id=actor.id,
            username=actor.username,
            target_account_id=account_id,
        )

        return _to_response(account)
