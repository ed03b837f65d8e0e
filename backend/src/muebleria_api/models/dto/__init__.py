"""Data transfer objects package."""

from muebleria_api.models.dto.access_rule import (
    AccessRuleCreate,
    AccessRuleListResponse,
    AccessRuleResponse,
    AccessRuleUpdate,
)
from muebleria_api.models.dto.account import (
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    AccountSummary,
    AccountUpdate,
    AdminPasswordResetRequest,
    DriverDetailsRequest,
    DriverDetailsResponse,
    ProfileUpdateRequest,
    UsernameCheckResponse,
)
from muebleria_api.models.dto.auth import (
    LoginRequest,
    LoginResponse,
    OwnProfileUpdateRequest,
    PasswordChangeRequest,
    UserInfo,
)
from muebleria_api.models.dto.branch import (
    BranchCreate,
    BranchListResponse,
    BranchOption,
    BranchResponse,
    BranchSummary,
    BranchUpdate,
)
from muebleria_api.models.dto.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)

__all__ = [
    "AccessRuleCreate",
    "AccessRuleListResponse",
    "AccessRuleResponse",
    "AccessRuleUpdate",
    "AccountCreate",
    "AccountListResponse",
    "AccountResponse",
    "AccountSummary",
    "AccountUpdate",
    "AdminPasswordResetRequest",
    "BranchCreate",
    "BranchListResponse",
    "BranchOption",
    "BranchResponse",
    "BranchSummary",
    "BranchUpdate",
    "CategoryCreate",
    "CategoryListResponse",
    "CategoryResponse",
    "CategoryUpdate",
    "DriverDetailsRequest",
    "DriverDetailsResponse",
    "LoginRequest",
    "LoginResponse",
    "OwnProfileUpdateRequest",
    "PasswordChangeRequest",
    "ProfileUpdateRequest",
    "UserInfo",
    "UsernameCheckResponse",
]
