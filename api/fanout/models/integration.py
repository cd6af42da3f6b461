"""Workspace integration model: one chat/webhook destination per row."""

from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fanout.models.base import Base, UUIDMixin, TimestampMixin


class WorkspaceIntegration(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "workspace_integrations"

    workspace_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    platform: Mapped[str] = mapped_column(String(50), nullable=False)
    webhook_url: Mapped[str] = mapped_column(Text, nullable=False)
    notification_types: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    label: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)
