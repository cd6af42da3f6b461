"""Validation for inbound notification requests and integration records."""

import json
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from pydantic import ValidationError as PydanticValidationError

from fanout.errors import ValidationError
from fanout.schemas.notification import (
    KNOWN_NOTIFICATION_TYPES,
    REQUIRED_FIELDS,
    NotificationRequest,
)

VALID_PLATFORMS = {"slack", "discord", "teams", "webhook"}

MISSING_FIELDS_MESSAGE = "Missing required fields: " + ", ".join(REQUIRED_FIELDS)

# Common typos -> correct platform
_PLATFORM_SUGGESTIONS: dict[str, str] = {
    "discrod": "discord",
    "dicord": "discord",
    "disocrd": "discord",
    "slak": "slack",
    "sclack": "slack",
    "team": "teams",
    "ms-teams": "teams",
    "msteams": "teams",
    "microsoft-teams": "teams",
    "webhok": "webhook",
    "hook": "webhook",
    "generic": "webhook",
}


# ---------------------------------------------------------------------------
# Notification requests
# ---------------------------------------------------------------------------


def parse_notification_request(raw: Any, strict_types: bool = False) -> NotificationRequest:
    """
    Turn a decoded JSON body into a NotificationRequest.

    Raises ValidationError when the body is not an object, when any of
    workspace_id / notification_type / title is missing or empty, or (with
    strict_types) when the notification type is not one of the known values.
    """
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError("Invalid JSON body")

    if not isinstance(raw, dict):
        raise ValidationError("Request body must be a JSON object")

    missing = [f for f in REQUIRED_FIELDS if raw.get(f) in (None, "")]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing=missing)

    data = dict(raw)
    if data.get("message") is None:
        data["message"] = ""

    try:
        request = NotificationRequest.model_validate(data)
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ValidationError(f"Invalid request: {details}")

    if strict_types and request.notification_type not in KNOWN_NOTIFICATION_TYPES:
        raise ValidationError(
            f"Unknown notification_type: {request.notification_type}. "
            f"Valid: {', '.join(sorted(KNOWN_NOTIFICATION_TYPES))}"
        )

    return request


# ---------------------------------------------------------------------------
# Integration records
# ---------------------------------------------------------------------------


def suggest_platform(input_platform: str) -> Optional[str]:
    """Return a suggestion if the input looks like a typo of a valid platform."""
    if input_platform in VALID_PLATFORMS:
        return None
    return _PLATFORM_SUGGESTIONS.get(input_platform.lower())


def validate_integration(platform: str, webhook_url: str) -> Optional[str]:
    """
    Validate an integration's URL for a given platform.
    Returns None if valid, or an error message string if invalid.
    """
    validators = {
        "discord": _validate_discord,
        "slack": _validate_slack,
        "teams": _validate_teams,
        "webhook": _validate_webhook,
    }
    validator = validators.get(platform)
    if not validator:
        return f"Unknown platform: {platform}"
    return validator(webhook_url)


def validate_notification_types(types: Iterable[str]) -> Optional[str]:
    types = list(types)
    if not types:
        return "notification_types must not be empty"
    unknown = sorted(set(types) - KNOWN_NOTIFICATION_TYPES)
    if unknown:
        return (
            f"Unknown notification types: {', '.join(unknown)}. "
            f"Valid: {', '.join(sorted(KNOWN_NOTIFICATION_TYPES))}"
        )
    return None


# --- Internal validators ---


def _validate_url(value, field_name: str = "webhook_url") -> Optional[str]:
    if not isinstance(value, str) or not value:
        return f"Missing required field: {field_name}"
    try:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https"):
            return f"{field_name} must use http or https protocol"
        if not parsed.netloc:
            return f"{field_name} is not a valid URL"
    except Exception:
        return f"{field_name} is not a valid URL"
    return None


def _validate_discord(url: str) -> Optional[str]:
    err = _validate_url(url)
    if err:
        return err
    if "discord.com/api/webhooks" not in url and "discordapp.com/api/webhooks" not in url:
        return "Discord webhook_url must be a discord.com webhook URL"
    return None


def _validate_slack(url: str) -> Optional[str]:
    err = _validate_url(url)
    if err:
        return err
    if "hooks.slack.com/" not in url:
        return "Slack webhook_url must be a hooks.slack.com URL"
    return None


def _validate_teams(url: str) -> Optional[str]:
    return _validate_url(url)


def _validate_webhook(url: str) -> Optional[str]:
    return _validate_url(url)
