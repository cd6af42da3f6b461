"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "api_keys",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("key_hash", sa.String(255), nullable=False, unique=True),
        sa.Column("key_prefix", sa.String(12), nullable=True, index=True),
        sa.Column("scopes", postgresql.JSON, server_default="[]"),
        sa.Column("is_active", sa.Boolean, server_default="true"),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "workspace_integrations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", sa.String(100), nullable=False),
        sa.Column(
            "platform",
            sa.String(50),
            nullable=False,
            comment="slack, discord, teams, webhook",
        ),
        sa.Column("webhook_url", sa.Text, nullable=False),
        sa.Column(
            "notification_types",
            postgresql.JSON,
            nullable=False,
            server_default="[]",
            comment="broadcast, task_assignment, deadline_reminder, channel_message",
        ),
        sa.Column("label", sa.String(200), nullable=True),
        sa.Column("is_active", sa.Boolean, server_default="true"),
        *_timestamps(),
    )
    op.create_index(
        "ix_workspace_integrations_workspace_id", "workspace_integrations", ["workspace_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_workspace_integrations_workspace_id", table_name="workspace_integrations")
    op.drop_table("workspace_integrations")
    op.drop_table("api_keys")
