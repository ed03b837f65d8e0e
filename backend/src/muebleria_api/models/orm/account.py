"""Account ORM model."""

from datetime import datetime
from uuid import UUID as PyUUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from muebleria_api.models.domain.role import Role
from muebleria_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class AccountORM(Base, UUIDMixin, TimestampMixin):
    """Staff account database model."""

    __tablename__ = "accounts"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=50, name="account_role"),
        nullable=False,
        index=True,
    )

    # Access control
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    bypass_access_rules: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    password_changed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Profile
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Branch this account manages, if any
    managed_branch_id: Mapped[PyUUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("branches.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Audit trail
    created_by_id: Mapped[PyUUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )
    updated_by_id: Mapped[PyUUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Logical deletion
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_by_id: Mapped[PyUUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    access_rules: Mapped[list["AccessRuleORM"]] = relationship(
        "AccessRuleORM",
        back_populates="account",
        cascade="all, delete-orphan",
        foreign_keys="AccessRuleORM.account_id",
    )
    managed_branch: Mapped["BranchORM | None"] = relationship(
        "BranchORM",
        foreign_keys=[managed_branch_id],
        lazy="joined",
    )
    driver_details: Mapped["DriverDetailORM | None"] = relationship(
        "DriverDetailORM",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
        foreign_keys="DriverDetailORM.account_id",
        lazy="joined",
    )
