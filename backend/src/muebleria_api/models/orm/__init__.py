"""SQLAlchemy ORM models package."""

from muebleria_api.models.orm.access_rule import AccessRuleORM
from muebleria_api.models.orm.account import AccountORM
from muebleria_api.models.orm.base import Base
from muebleria_api.models.orm.branch import BranchORM
from muebleria_api.models.orm.category import CategoryORM
from muebleria_api.models.orm.driver_detail import DriverDetailORM

__all__ = [
    "AccessRuleORM",
    "AccountORM",
    "Base",
    "BranchORM",
    "CategoryORM",
    "DriverDetailORM",
]
