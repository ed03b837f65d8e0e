"""Repository package."""

from muebleria_api.repositories.access_rule_repository import AccessRuleRepository
from muebleria_api.repositories.account_repository import AccountRepository
from muebleria_api.repositories.base import BaseRepository

__all__ = [
    "AccessRuleRepository",
    "AccountRepository",
    "BaseRepository",
]
