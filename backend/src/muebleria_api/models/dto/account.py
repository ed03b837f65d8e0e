"""Account management DTOs."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from muebleria_api.models.domain.role import Role
from muebleria_api.models.dto.access_rule import AccessRuleCreate, AccessRuleResponse
from muebleria_api.utils.validation import MAX_USERNAME_LENGTH, normalize_username


class DriverDetailsRequest(BaseModel):
    """Driver license data. Required for DRIVER accounts."""

    license_number: str = Field(min_length=1, max_length=50)
    license_expiration_date: date | None = None

    @field_validator("license_number")
    @classmethod
    def validate_license_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("License number must not be blank")
        return v


class DriverDetailsResponse(BaseModel):
    """Driver license data."""

    license_number: str
    license_expiration_date: date | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class AccountCreate(BaseModel):
    """Account creation request.

    Accounts either bypass access rules or get an initial schedule, never both.
    DRIVER accounts must carry ``driver_details`` with a license number.
    """

    username: str = Field(min_length=3, max_length=MAX_USERNAME_LENGTH)
    password: str = Field(min_length=1, max_length=128)
    role: Role
    is_active: bool = True
    bypass_access_rules: bool = False
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    managed_branch_id: UUID | None = None
    driver_details: DriverDetailsRequest | None = None
    access_rules: list[AccessRuleCreate] = Field(default=[], max_length=7)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Allow letters, digits, dots, underscores and hyphens."""
        normalized = normalize_username(v)
        if normalized is None:
            raise ValueError("Username may only contain letters, digits, '.', '_' and '-'")
        return normalized


class AccountUpdate(BaseModel):
    """Account update request (management path).

    ``access_rules`` may only accompany a request that turns the bypass off;
    the schedule is then installed in the same step.
    An explicit null ``managed_branch_id`` unassigns the managed branch.
    """

    is_active: bool | None = None
    bypass_access_rules: bool | None = None
    role: Role | None = None
    managed_branch_id: UUID | None = None
    driver_details: DriverDetailsRequest | None = None
    access_rules: list[AccessRuleCreate] | None = Field(default=None, max_length=7)


class ProfileUpdateRequest(BaseModel):
    """Profile update of another account by a manager."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)


class AdminPasswordResetRequest(BaseModel):
    """Password reset of another account by a manager."""

    new_password: str = Field(min_length=1, max_length=128)


class AccountSummary(BaseModel):
    """Account list entry."""

    id: UUID
    username: str
    role: Role
    is_active: bool
    is_deleted: bool
    bypass_access_rules: bool
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    managed_branch_id: UUID | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class AccountResponse(BaseModel):
    """Account detail DTO."""

    id: UUID
    username: str
    role: Role
    is_active: bool
    is_deleted: bool
    bypass_access_rules: bool
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    managed_branch_id: UUID | None = None
    managed_branch_name: str | None = None
    driver_details: DriverDetailsResponse | None = None
    password_changed_at: datetime | None = None
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    access_rules: list[AccessRuleResponse] = []

    class Config:
        """Pydantic config."""

        from_attributes = True


class AccountListResponse(BaseModel):
    """Paginated account list."""

    items: list[AccountSummary]
    total: int
    page: int
    page_size: int


class UsernameCheckResponse(BaseModel):
    """Username availability result."""

    username: str
    available: bool
