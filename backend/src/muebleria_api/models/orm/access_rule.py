"""Access rule ORM model."""

from datetime import time
from uuid import UUID as PyUUID

from sqlalchemy import Boolean, Enum, ForeignKey, String, Time, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from muebleria_api.models.domain.account import DayOfWeek
from muebleria_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class AccessRuleORM(Base, UUIDMixin, TimestampMixin):
    """Weekly access window owned by one account."""

    __tablename__ = "access_rules"
    __table_args__ = (
        UniqueConstraint("account_id", "day_of_week", name="uq_access_rules_account_day"),
    )

    account_id: Mapped[PyUUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[DayOfWeek] = mapped_column(
        Enum(DayOfWeek, native_enum=False, length=10, name="day_of_week"),
        nullable=False,
    )
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    timezone: Mapped[str] = mapped_column(String(60), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

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

    # Relationships
    account: Mapped["AccountORM"] = relationship(
        "AccountORM",
        back_populates="access_rules",
        foreign_keys=[account_id],
    )
