"""Pydantic schemas for workspace integrations."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class IntegrationCreate(BaseModel):
    platform: str = Field(..., description="Platform: slack, discord, teams, webhook")
    webhook_url: str = Field(..., description="Destination URL for notifications")
    notification_types: list[str] = Field(
        ..., description="Notification types this integration receives"
    )
    label: Optional[str] = Field(None, max_length=200, description="Optional label")


class IntegrationUpdate(BaseModel):
    platform: Optional[str] = None
    webhook_url: Optional[str] = None
    notification_types: Optional[list[str]] = None
    label: Optional[str] = None
    is_active: Optional[bool] = None


class IntegrationResponse(BaseModel):
    id: uuid.UUID
    workspace_id: str
    platform: str
    webhook_url: str
    notification_types: list[str]
    label: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
