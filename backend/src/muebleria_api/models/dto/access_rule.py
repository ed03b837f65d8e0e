"""Access rule DTOs."""

from datetime import datetime, time
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from muebleria_api.models.domain.account import DayOfWeek
from muebleria_api.security.access_window import resolve_timezone


def validate_timezone_name(v: str | None) -> str | None:
    """Reject timezone identifiers unknown to the IANA database."""
    if v is None:
        return v
    v = v.strip()
    if resolve_timezone(v) is None:
        raise ValueError(f"Unknown timezone: {v}")
    return v


def validate_local_time(v: time | None) -> time | None:
    """Reject wall-clock times that carry a UTC offset."""
    if v is not None and v.tzinfo is not None:
        raise ValueError("Times must not carry a UTC offset; use the timezone field")
    return v


class AccessRuleCreate(BaseModel):
    """Access rule creation request.

    Omitting ``timezone`` applies the configured default access timezone.
    """

    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    timezone: str | None = Field(default=None, max_length=60)
    is_active: bool = True

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate the IANA timezone identifier."""
        return validate_timezone_name(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, v: time | None) -> time | None:
        """Times are local to the rule timezone."""
        return validate_local_time(v)

    @model_validator(mode="after")
    def validate_window(self) -> "AccessRuleCreate":
        """Ensure the window does not end before it starts."""
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self


class AccessRuleUpdate(BaseModel):
    """Access rule update request. Only provided fields change."""

    day_of_week: DayOfWeek | None = None
    start_time: time | None = None
    end_time: time | None = None
    timezone: str | None = Field(default=None, max_length=60)
    is_active: bool | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate the IANA timezone identifier."""
        return validate_timezone_name(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, v: time | None) -> time | None:
        """Times are local to the rule timezone."""
        return validate_local_time(v)

    @model_validator(mode="after")
    def validate_window(self) -> "AccessRuleUpdate":
        """Ensure the window does not end before it starts when both ends are given."""
        if self.start_time is not None and self.end_time is not None:
            if self.end_time < self.start_time:
                raise ValueError("end_time must not be earlier than start_time")
        return self


class AccessRuleResponse(BaseModel):
    """Access rule response DTO."""

    id: UUID
    account_id: UUID
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    timezone: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class AccessRuleListResponse(BaseModel):
    """Access rules of one account."""

    items: list[AccessRuleResponse]
    total: int
