"""Access rule (work schedule) router, nested under accounts."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from muebleria_api.dependencies import get_access_rule_service
from muebleria_api.models.domain.account import Account
from muebleria_api.models.dto.access_rule import (
    AccessRuleCreate,
    AccessRuleListResponse,
    AccessRuleResponse,
    AccessRuleUpdate,
)
from muebleria_api.security.auth import require_manager
from muebleria_api.services.access_rule_service import AccessRuleService

router = APIRouter()


@router.get("/{account_id}/access-rules", response_model=AccessRuleListResponse)
async def list_access_rules(
    account_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    service: Annotated[AccessRuleService, Depends(get_access_rule_service)],
) -> AccessRuleListResponse:
    """List an account's access windows, Monday first."""
    return await service.list_rules(current_user, account_id)


@router.post(
    "/{account_id}/access-rules",
    response_model=AccessRuleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_access_rule(
    account_id: UUID,
    body: AccessRuleCreate,
    current_user: Annotated[Account, Depends(require_manager)],
    service: Annotated[AccessRuleService, Depends(get_access_rule_service)],
) -> AccessRuleResponse:
    """Add an access window to an account. One window per day of week."""
    return await service.create_rule(current_user, account_id, body)


@router.put("/{account_id}/access-rules/{rule_id}", response_model=AccessRuleResponse)
async def update_access_rule(
    account_id: UUID,
    rule_id: UUID,
    body: AccessRuleUpdate,
    current_user: Annotated[Account, Depends(require_manager)],
    service: Annotated[AccessRuleService, Depends(get_access_rule_service)],
) -> AccessRuleResponse:
    """Update an access window."""
    return await service.update_rule(current_user, account_id, rule_id, body)


@router.delete("/{account_id}/access-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_access_rule(
    account_id: UUID,
    rule_id: UUID,
    current_user: Annotated[Account, Depends(require_manager)],
    service: Annotated[AccessRuleService, Depends(get_access_rule_service)],
) -> None:
    """Delete an access window."""
    await service.delete_rule(current_user, account_id, rule_id)
