"""Base types for notification channel adapters.

Formatters return one of the platform payload variants below; the variant
is serialized to JSON only when the dispatcher builds the outbound request.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union


@dataclass
class ChannelPayload:
    """Represents the HTTP request payload for a notification channel."""
    method: str
    url: str
    headers: dict[str, str]
    body: str  # JSON string


@dataclass
class SlackPayload:
    text: str
    blocks: list[dict[str, Any]]
    platform: Literal["slack"] = "slack"

    def to_dict(self) -> dict:
        return {"blocks": self.blocks, "text": self.text}


@dataclass
class DiscordPayload:
    embed: dict[str, Any]
    platform: Literal["discord"] = "discord"

    def to_dict(self) -> dict:
        return {"embeds": [self.embed]}


@dataclass
class TeamsPayload:
    theme_color: str
    summary: str
    sections: list[dict[str, Any]]
    potential_action: list[dict[str, Any]] = field(default_factory=list)
    platform: Literal["teams"] = "teams"

    def to_dict(self) -> dict:
        card: dict[str, Any] = {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "themeColor": self.theme_color,
            "summary": self.summary,
            "sections": self.sections,
        }
        if self.potential_action:
            card["potentialAction"] = self.potential_action
        return card


@dataclass
class GenericPayload:
    type: str
    title: str
    message: str
    metadata: Optional[dict[str, Any]]
    timestamp: str
    platform: Literal["webhook"] = "webhook"

    def to_dict(self) -> dict:
        body: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "message": self.message,
        }
        if self.metadata is not None:
            body["metadata"] = self.metadata
        body["timestamp"] = self.timestamp
        return body


FormattedPayload = Union[SlackPayload, DiscordPayload, TeamsPayload, GenericPayload]


def to_channel_payload(url: str, payload: FormattedPayload) -> ChannelPayload:
    """Serialize a formatted payload into the POST the dispatcher sends."""
    return ChannelPayload(
        method="POST",
        url=url,
        headers={"Content-Type": "application/json"},
        body=json.dumps(payload.to_dict()),
    )
