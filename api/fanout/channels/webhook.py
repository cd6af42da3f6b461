"""Generic webhook channel adapter."""

import datetime
from typing import Optional

from fanout.channels import GenericPayload
from fanout.schemas.notification import NotificationRequest


def format_webhook(
    request: NotificationRequest,
    now: Optional[datetime.datetime] = None,
) -> GenericPayload:
    """Flat JSON envelope for generic webhooks and unrecognized platforms."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return GenericPayload(
        type=request.notification_type,
        title=request.title,
        message=request.message,
        metadata=request.metadata_dict(),
        timestamp=now.isoformat(),
    )
