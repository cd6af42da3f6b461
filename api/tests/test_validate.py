"""Tests for request parsing and integration validation."""

import json

import pytest

from fanout.channels.detect import detect_platform
from fanout.channels.validate import (
    MISSING_FIELDS_MESSAGE,
    parse_notification_request,
    suggest_platform,
    validate_integration,
    validate_notification_types,
)
from fanout.errors import ValidationError

VALID = {
    "workspace_id": "w1",
    "notification_type": "broadcast",
    "title": "Hi",
    "message": "Hello all",
}


def without(field: str) -> dict:
    return {k: v for k, v in VALID.items() if k != field}


class TestParseNotificationRequest:
    def test_valid_request(self):
        request = parse_notification_request(VALID)
        assert request.workspace_id == "w1"
        assert request.notification_type == "broadcast"
        assert request.title == "Hi"
        assert request.message == "Hello all"
        assert request.metadata is None

    def test_accepts_raw_json_bytes(self):
        request = parse_notification_request(json.dumps(VALID).encode())
        assert request.title == "Hi"

    @pytest.mark.parametrize("field", ["workspace_id", "notification_type", "title"])
    def test_missing_required_field(self, field):
        with pytest.raises(ValidationError) as exc_info:
            parse_notification_request(without(field))
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == MISSING_FIELDS_MESSAGE
        assert exc_info.value.missing == [field]

    @pytest.mark.parametrize("field", ["workspace_id", "notification_type", "title"])
    def test_empty_required_field(self, field):
        with pytest.raises(ValidationError) as exc_info:
            parse_notification_request({**VALID, field: ""})
        assert exc_info.value.missing == [field]

    def test_lists_every_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_notification_request({"message": "x"})
        assert exc_info.value.missing == ["workspace_id", "notification_type", "title"]
        assert exc_info.value.to_body() == {
            "error": "Missing required fields: workspace_id, notification_type, title",
            "missing": ["workspace_id", "notification_type", "title"],
        }

    def test_message_defaults_to_empty(self):
        request = parse_notification_request(without("message"))
        assert request.message == ""

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON body"):
            parse_notification_request(b"{not json")

    def test_non_object_body(self):
        with pytest.raises(ValidationError, match="JSON object"):
            parse_notification_request([VALID])

    def test_wrong_field_type(self):
        with pytest.raises(ValidationError, match="title"):
            parse_notification_request({**VALID, "title": {"nested": True}})

    def test_unknown_type_is_permitted_by_default(self):
        request = parse_notification_request({**VALID, "notification_type": "poll_created"})
        assert request.notification_type == "poll_created"

    def test_unknown_type_rejected_in_strict_mode(self):
        with pytest.raises(ValidationError, match="Unknown notification_type"):
            parse_notification_request(
                {**VALID, "notification_type": "poll_created"}, strict_types=True
            )

    def test_metadata_parsed(self):
        request = parse_notification_request(
            {**VALID, "metadata": {"priority": "high", "url": "https://app.example.com"}}
        )
        assert request.metadata.priority == "high"
        assert request.metadata.url == "https://app.example.com"
        assert request.metadata.sender_name is None


class TestIntegrationValidation:
    def test_slack_requires_slack_host(self):
        assert validate_integration("slack", "https://hooks.slack.com/services/a/b/c") is None
        assert "hooks.slack.com" in validate_integration("slack", "https://example.com/hook")

    def test_discord_requires_discord_host(self):
        assert validate_integration("discord", "https://discord.com/api/webhooks/1/abc") is None
        assert "discord.com" in validate_integration("discord", "https://example.com/hook")

    def test_url_scheme(self):
        assert "http or https" in validate_integration("webhook", "ftp://example.com/hook")

    def test_missing_url(self):
        assert validate_integration("teams", "") == "Missing required field: webhook_url"

    def test_unknown_platform(self):
        assert validate_integration("pager", "https://example.com") == "Unknown platform: pager"

    def test_suggestions(self):
        assert suggest_platform("discrod") == "discord"
        assert suggest_platform("MS-Teams") == "teams"
        assert suggest_platform("slack") is None
        assert suggest_platform("carrier-pigeon") is None

    def test_notification_types(self):
        assert validate_notification_types(["broadcast", "task_assignment"]) is None
        assert "must not be empty" in validate_notification_types([])
        assert "poll" in validate_notification_types(["broadcast", "poll"])


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://discord.com/api/webhooks/123/abc", "discord"),
        ("https://hooks.slack.com/services/T/B/X", "slack"),
        ("https://acme.webhook.office.com/webhookb2/xyz", "teams"),
        ("https://example.com/notify", "webhook"),
    ],
)
def test_detect_platform(url, expected):
    assert detect_platform(url) == expected
