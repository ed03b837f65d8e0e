"""Product category DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _strip_name(v: str) -> str:
    v = v.strip()
    if len(v) < 4:
        raise ValueError("Category name must be between 4 and 100 characters")
    return v


class CategoryCreate(BaseModel):
    """Category creation request."""

    name: str = Field(min_length=4, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)


class CategoryUpdate(BaseModel):
    """Category rename request."""

    name: str = Field(min_length=4, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)


class CategoryResponse(BaseModel):
    """Category DTO."""

    id: UUID
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class CategoryListResponse(BaseModel):
    """Paginated category list."""

    items: list[CategoryResponse]
    total: int
    page: int
    page_size: int
