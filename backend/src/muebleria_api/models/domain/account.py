"""Account and access rule domain models."""

from collections.abc import Iterable
from datetime import date, datetime, time
from enum import StrEnum
from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel

from muebleria_api.models.domain.role import Role

R = TypeVar("R")


class DayOfWeek(StrEnum):
    """Days of the week, in ``datetime.weekday()`` order."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        """Get the day for a ``datetime.weekday()`` value (Monday is 0)."""
        return list(cls)[weekday]


def sort_by_day(rules: Iterable[R]) -> list[R]:
    """Order access rules from Monday to Sunday."""
    order = list(DayOfWeek)
    return sorted(rules, key=lambda rule: order.index(rule.day_of_week))


class AccountStatus(StrEnum):
    """Status filter used when listing accounts."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"
    ALL = "ALL"


class AccessRule(BaseModel):
    """A recurring weekly access window in a specific timezone."""

    id: UUID | None = None
    account_id: UUID | None = None
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    timezone: str
    is_active: bool = True

    class Config:
        """Pydantic config."""

        from_attributes = True


class DriverDetails(BaseModel):
    """License data of a DRIVER account."""

    license_number: str
    license_expiration_date: date | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class Account(BaseModel):
    """Authenticated account domain model."""

    id: UUID
    username: str
    role: Role
    is_active: bool = True
    is_deleted: bool = False
    bypass_access_rules: bool = False
    password_changed_at: datetime | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    managed_branch_id: UUID | None = None
    driver_details: DriverDetails | None = None
    access_rules: list[AccessRule] = []

    class Config:
        """Pydantic config."""

        from_attributes = True
