"""Discord channel adapter."""

import datetime
from typing import Optional

from fanout.channels import DiscordPayload
from fanout.channels.colors import color_int
from fanout.schemas.notification import NotificationMetadata, NotificationRequest


def format_discord(
    request: NotificationRequest,
    now: Optional[datetime.datetime] = None,
) -> DiscordPayload:
    """
    Format a notification as a single Discord embed.

    author, url and fields are only present when the matching metadata is.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    meta = request.metadata or NotificationMetadata()

    embed = {
        "title": request.title,
        "description": request.message,
        "color": color_int(request.notification_type),
        "timestamp": now.isoformat(),
    }

    if meta.sender_name:
        embed["author"] = {"name": str(meta.sender_name)}

    if meta.url:
        embed["url"] = str(meta.url)

    fields = []
    if meta.priority:
        fields.append({"name": "Priority", "value": str(meta.priority), "inline": True})
    if meta.due_date:
        fields.append({"name": "Due Date", "value": str(meta.due_date), "inline": True})
    if fields:
        embed["fields"] = fields

    return DiscordPayload(embed=embed)
