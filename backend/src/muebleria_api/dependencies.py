"""Centralized dependency injection factories for FastAPI."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from muebleria_api.database import get_db
from muebleria_api.services.access_rule_service import AccessRuleService
from muebleria_api.services.account_service import AccountService
from muebleria_api.services.auth_service import AuthService
from muebleria_api.services.branch_service import BranchService
from muebleria_api.services.category_service import CategoryService


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get AuthService instance."""
    return AuthService(db)


def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    """Get AccountService instance."""
    return AccountService(db)


def get_access_rule_service(db: AsyncSession = Depends(get_db)) -> AccessRuleService:
    """Get AccessRuleService instance."""
    return AccessRuleService(db)


def get_branch_service(db: AsyncSession = Depends(get_db)) -> BranchService:
    """Get BranchService instance."""
    return BranchService(db)


def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    """Get CategoryService instance."""
    return CategoryService(db)
