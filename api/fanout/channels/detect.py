"""Auto-detection of integration platform from URL."""


def detect_platform(url: str) -> str:
    """
    Detect the integration platform from a webhook URL.

    Returns:
        Platform string: 'discord', 'slack', 'teams', or 'webhook'
    """
    url_lower = url.lower()

    if "discord.com/api/webhooks" in url_lower or "discordapp.com/api/webhooks" in url_lower:
        return "discord"

    if "hooks.slack.com/" in url_lower:
        return "slack"

    if "webhook.office.com" in url_lower or "logic.azure.com" in url_lower:
        return "teams"

    return "webhook"
