"""Driver detail ORM model."""

from datetime import date
from uuid import UUID as PyUUID

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from muebleria_api.models.orm.base import Base, TimestampMixin


class DriverDetailORM(Base, TimestampMixin):
    """License data of a DRIVER account, keyed by the account itself."""

    __tablename__ = "driver_details"

    account_id: Mapped[PyUUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    license_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    license_expiration_date: Mapped[date | None] = mapped_column(Date, nullable=True)

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

    account: Mapped["AccountORM"] = relationship(
        "AccountORM",
        back_populates="driver_details",
        foreign_keys=[account_id],
    )
