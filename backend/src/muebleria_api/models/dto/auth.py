"""Authentication DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from muebleria_api.models.domain.role import Role
from muebleria_api.models.dto.access_rule import AccessRuleResponse
from muebleria_api.models.dto.account import DriverDetailsResponse


class LoginRequest(BaseModel):
    """Username and password login request."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=128)


class UserInfo(BaseModel):
    """Own account view returned at login and by ``/auth/me``."""

    id: UUID
    username: str
    role: Role
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    managed_branch_id: UUID | None = None
    driver_details: DriverDetailsResponse | None = None
    bypass_access_rules: bool
    access_rules: list[AccessRuleResponse] = []


class LoginResponse(BaseModel):
    """Successful login response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: datetime
    user: UserInfo


class PasswordChangeRequest(BaseModel):
    """Own password change request."""

    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=1, max_length=128)


class OwnProfileUpdateRequest(BaseModel):
    """Own profile update. Names are managed by administrators."""

    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
