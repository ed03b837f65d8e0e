"""Branches, categories and driver details

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("updated_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _audit_foreign_keys() -> list[sa.ForeignKeyConstraint]:
    return [
        sa.ForeignKeyConstraint(["created_by_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["updated_by_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["deleted_by_id"], ["accounts.id"], ondelete="SET NULL"),
    ]


def upgrade() -> None:
    # Create branches table
    op.create_table(
        "branches",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("street_address", sa.String(255), nullable=True),
        sa.Column("address_line2", sa.String(255), nullable=True),
        sa.Column("neighborhood", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("rfc", sa.String(13), nullable=True),
        sa.Column("order_prefix", sa.String(10), nullable=False),
        sa.Column("last_order_sequence_number", sa.Integer(), nullable=False, server_default="0"),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("order_prefix"),
        *_audit_foreign_keys(),
    )
    op.create_index("ix_branches_is_deleted", "branches", ["is_deleted"])

    # Create categories table
    op.create_table(
        "categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        *_audit_foreign_keys(),
    )
    op.create_index("ix_categories_is_deleted", "categories", ["is_deleted"])

    # Create driver_details table
    op.create_table(
        "driver_details",
        sa.Column("account_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("license_number", sa.String(50), nullable=False),
        sa.Column("license_expiration_date", sa.Date(), nullable=True),
        sa.Column("created_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("updated_by_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("account_id"),
        sa.UniqueConstraint("license_number"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["updated_by_id"], ["accounts.id"], ondelete="SET NULL"),
    )

    # Managed branch link on accounts
    op.add_column(
        "accounts",
        sa.Column("managed_branch_id", postgresql.UUID(as_uuid=True), nullable=True),
    )
    op.create_foreign_key(
        "fk_accounts_managed_branch_id",
        "accounts",
        "branches",
        ["managed_branch_id"],
        ["id"],
        ondelete="SET NULL",
    )
    op.create_index("ix_accounts_managed_branch_id", "accounts", ["managed_branch_id"])


def downgrade() -> None:
    op.drop_index("ix_accounts_managed_branch_id", table_name="accounts")
    op.drop_constraint("fk_accounts_managed_branch_id", "accounts", type_="foreignkey")
    op.drop_column("accounts", "managed_branch_id")
    op.drop_table("driver_details")
    op.drop_index("ix_categories_is_deleted", table_name="categories")
    op.drop_table("categories")
    op.drop_index("ix_branches_is_deleted", table_name="branches")
    op.drop_table("branches")
