"""Branch DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

# Mexican tax id of a legal entity (persona moral) or individual
RFC_PATTERN = r"^[A-Z&Ñ]{3,4}\d{6}[A-Z0-9]{3}$"
DIGITS_PATTERN = r"^\d+$"


class BranchCreate(BaseModel):
    """Branch creation request."""

    name: str = Field(min_length=1, max_length=100)
    street_address: str | None = Field(default=None, max_length=255)
    address_line2: str | None = Field(default=None, max_length=255)
    neighborhood: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=10, pattern=DIGITS_PATTERN)
    phone: str | None = Field(default=None, max_length=20, pattern=DIGITS_PATTERN)
    rfc: str | None = Field(default=None, max_length=13, pattern=RFC_PATTERN)
    order_prefix: str = Field(min_length=1, max_length=10)
    last_order_sequence_number: int = Field(default=0, ge=0)

    @field_validator("name", "order_prefix")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Reject blank names and prefixes."""
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank")
        return v


class BranchUpdate(BaseModel):
    """Branch update request. Only provided fields change.

    Address and contact fields may be cleared with an explicit null; name,
    order prefix and sequence number may not.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    street_address: str | None = Field(default=None, max_length=255)
    address_line2: str | None = Field(default=None, max_length=255)
    neighborhood: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=10, pattern=DIGITS_PATTERN)
    phone: str | None = Field(default=None, max_length=20, pattern=DIGITS_PATTERN)
    rfc: str | None = Field(default=None, max_length=13, pattern=RFC_PATTERN)
    order_prefix: str | None = Field(default=None, min_length=1, max_length=10)
    last_order_sequence_number: int | None = Field(default=None, ge=0)

    @field_validator("name", "order_prefix")
    @classmethod
    def strip_required(cls, v: str | None) -> str | None:
        """Reject blank names and prefixes."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank")
        return v

    @model_validator(mode="after")
    def validate_required_not_cleared(self) -> "BranchUpdate":
        """Required columns cannot be set to null."""
        for field in ("name", "order_prefix", "last_order_sequence_number"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class BranchResponse(BaseModel):
    """Branch detail DTO."""

    id: UUID
    name: str
    street_address: str | None = None
    address_line2: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    phone: str | None = None
    rfc: str | None = None
    order_prefix: str
    last_order_sequence_number: int
    is_deleted: bool
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class BranchSummary(BaseModel):
    """Branch list entry."""

    id: UUID
    name: str
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class BranchListResponse(BaseModel):
    """Paginated branch list."""

    items: list[BranchSummary]
    total: int
    page: int
    page_size: int


class BranchOption(BaseModel):
    """Branch id and name, for selection lists."""

    id: UUID
    name: str

    class Config:
        """Pydantic config."""

        from_attributes = True
