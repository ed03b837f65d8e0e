"""Domain models package."""

from muebleria_api.models.domain.account import (
    Account,
    AccessRule,
    AccountStatus,
    DayOfWeek,
    DriverDetails,
    sort_by_day,
)
from muebleria_api.models.domain.branch import BranchStatus
from muebleria_api.models.domain.role import ROLE_LEVELS, TOP_ROLE, Role

__all__ = [
    "Account",
    "AccessRule",
    "AccountStatus",
    "BranchStatus",
    "DayOfWeek",
    "DriverDetails",
    "ROLE_LEVELS",
    "Role",
    "TOP_ROLE",
    "sort_by_day",
]
