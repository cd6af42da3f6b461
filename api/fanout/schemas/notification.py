"""Pydantic schemas for the notification fan-out request."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationType(str, Enum):
    BROADCAST = "broadcast"
    TASK_ASSIGNMENT = "task_assignment"
    DEADLINE_REMINDER = "deadline_reminder"
    CHANNEL_MESSAGE = "channel_message"


KNOWN_NOTIFICATION_TYPES = {t.value for t in NotificationType}

REQUIRED_FIELDS = ("workspace_id", "notification_type", "title")


class NotificationMetadata(BaseModel):
    # Unknown keys are kept so generic webhooks receive the caller's metadata untouched.
    # Display keys accept any JSON value; formatters render them as text.
    model_config = ConfigDict(extra="allow")

    task_id: Any = None
    channel_id: Any = None
    sender_name: Any = None
    due_date: Any = None
    priority: Any = None
    url: Any = None


class NotificationRequest(BaseModel):
    workspace_id: str
    notification_type: str = Field(
        ..., description="broadcast, task_assignment, deadline_reminder or channel_message"
    )
    title: str
    message: str = ""
    metadata: Optional[NotificationMetadata] = None

    def metadata_dict(self) -> Optional[dict]:
        """Metadata as the caller sent it (None when absent)."""
        if self.metadata is None:
            return None
        return self.metadata.model_dump(exclude_unset=True)
