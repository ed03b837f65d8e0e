"""Services package."""

from muebleria_api.services.access_rule_service import AccessRuleService
from muebleria_api.services.account_service import AccountService
from muebleria_api.services.auth_service import AuthService

__all__ = [
    "AccessRuleService",
    "AccountService",
    "AuthService",
]
