"""Slack channel adapter."""

from fanout.channels import SlackPayload
from fanout.schemas.notification import NotificationRequest


def format_slack(request: NotificationRequest) -> SlackPayload:
    """
    Format a notification as a Slack Block Kit message.

    The actions block with the "View in App" button is only added when
    metadata carries a url.
    """
    blocks = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": request.title, "emoji": True},
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": request.message},
        },
    ]

    url = request.metadata.url if request.metadata else None
    if url:
        blocks.append({
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "View in App", "emoji": True},
                    "url": str(url),
                }
            ],
        })

    # Flattened text is what Slack shows in push/notification previews
    return SlackPayload(
        text=f"{request.title}: {request.message}",
        blocks=blocks,
    )
