"""Microsoft Teams channel adapter."""

from fanout.channels import TeamsPayload
from fanout.channels.colors import color_hex
from fanout.schemas.notification import NotificationMetadata, NotificationRequest


def format_teams(request: NotificationRequest) -> TeamsPayload:
    """Format a notification as a legacy Office 365 connector MessageCard."""
    meta = request.metadata or NotificationMetadata()

    payload = TeamsPayload(
        theme_color=color_hex(request.notification_type),
        summary=request.title,
        sections=[
            {
                "activityTitle": request.title,
                "activitySubtitle": str(meta.sender_name) if meta.sender_name else "System",
                "text": request.message,
            }
        ],
    )

    if meta.url:
        payload.potential_action.append({
            "@type": "OpenUri",
            "name": "View in App",
            "targets": [{"os": "default", "uri": str(meta.url)}],
        })

    return payload
