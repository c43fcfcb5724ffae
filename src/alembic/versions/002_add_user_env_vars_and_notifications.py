"""Add user_env_vars and notifications tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-17 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

AutoString = sqlmodel.sql.sqltypes.AutoString


def upgrade() -> None:
    op.create_table(
        "user_env_vars",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("key", AutoString(length=100), nullable=False),
        sa.Column("value", AutoString(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "key", name="uq_user_env_vars_user_key"),
    )
    op.create_index("ix_user_env_vars_user_id", "user_env_vars", ["user_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("type", AutoString(length=30), nullable=False),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("message", AutoString(length=1000), nullable=False),
        sa.Column("resource_type", AutoString(length=20), nullable=True),
        sa.Column("resource_id", sa.Uuid(), nullable=True),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Inbox queries filter by recipient and tenant, newest first
    op.create_index(
        "ix_notifications_user_tenant_created",
        "notifications",
        ["user_id", "tenant_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_notifications_user_tenant_created", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_user_env_vars_user_id", table_name="user_env_vars")
    op.drop_table("user_env_vars")
