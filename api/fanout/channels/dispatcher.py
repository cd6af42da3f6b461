"""Concurrent fan-out of a notification to its resolved integrations."""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

import httpx

from fanout.channels import FormattedPayload, to_channel_payload
from fanout.channels.discord import format_discord
from fanout.channels.slack import format_slack
from fanout.channels.teams import format_teams
from fanout.channels.webhook import format_webhook
from fanout.config import settings
from fanout.models.integration import WorkspaceIntegration
from fanout.schemas.notification import NotificationRequest
from fanout.security import safe_http_client

logger = logging.getLogger(__name__)

_MAX_REASON_BODY = 500


@dataclass
class DispatchOutcome:
    integration_id: Optional[uuid.UUID]
    platform: str
    success: bool
    status_code: Optional[int] = None
    reason: Optional[str] = None


@dataclass
class DispatchSummary:
    outcomes: list[DispatchOutcome] = field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def failures(self) -> list[str]:
        return [o.reason or f"{o.platform} webhook failed" for o in self.outcomes if not o.success]

    def to_response(self) -> dict:
        return {
            "success": True,
            "sent": self.sent,
            "total": self.total,
            "failures": self.failures,
        }


def format_for_platform(platform: str, request: NotificationRequest) -> FormattedPayload:
    """Pick the formatter for a platform; anything unrecognized gets the generic envelope."""
    if platform == "slack":
        return format_slack(request)
    if platform == "discord":
        return format_discord(request)
    if platform == "teams":
        return format_teams(request)
    return format_webhook(request)


async def dispatch_notifications(
    integrations: list[WorkspaceIntegration],
    request: NotificationRequest,
    client: Optional[httpx.AsyncClient] = None,
) -> DispatchSummary:
    """
    POST the notification to every integration concurrently.

    Each send is attempted exactly once. A failed send is recorded in the
    summary and never cancels or delays the others.

    Args:
        integrations: Resolved WorkspaceIntegration rows
        request: The validated notification
        client: Optional httpx client; a SSRF-safe one is created when omitted
    """
    if not integrations:
        return DispatchSummary()

    if client is None:
        async with safe_http_client(timeout=settings.dispatch_timeout_seconds) as owned:
            return await _dispatch_all(owned, integrations, request)
    return await _dispatch_all(client, integrations, request)


async def _dispatch_all(
    client: httpx.AsyncClient,
    integrations: list[WorkspaceIntegration],
    request: NotificationRequest,
) -> DispatchSummary:
    tasks = [_send_notification(client, integration, request) for integration in integrations]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    outcomes = []
    for integration, result in zip(integrations, results):
        if isinstance(result, BaseException):
            # _send_notification catches everything it expects; this is a bug guard
            logger.error(
                "Unexpected error dispatching to integration %s", integration.id, exc_info=result
            )
            outcomes.append(DispatchOutcome(
                integration_id=integration.id,
                platform=integration.platform,
                success=False,
                reason=f"{integration.platform} webhook failed: {result}",
            ))
        else:
            outcomes.append(result)

    summary = DispatchSummary(outcomes=outcomes)
    if summary.failures:
        logger.warning("Some webhooks failed: %s", summary.failures)
    logger.info(
        "Webhook notification complete: %d/%d successful", summary.sent, summary.total
    )
    return summary


async def _send_notification(
    client: httpx.AsyncClient,
    integration: WorkspaceIntegration,
    request: NotificationRequest,
) -> DispatchOutcome:
    """Send a single notification and report how it went. Never raises."""
    platform = integration.platform
    payload = to_channel_payload(
        integration.webhook_url, format_for_platform(platform, request)
    )

    logger.info("Sending to %s: %s", platform, _host_of(payload.url))

    try:
        response = await client.request(
            method=payload.method,
            url=payload.url,
            headers=payload.headers,
            content=payload.body,
        )
    except Exception as e:
        logger.warning("Failed to send notification to integration %s: %s", integration.id, e)
        return DispatchOutcome(
            integration_id=integration.id,
            platform=platform,
            success=False,
            reason=f"{platform} webhook failed: {str(e) or type(e).__name__}",
        )

    if not response.is_success:
        error_text = response.text[:_MAX_REASON_BODY]
        logger.warning(
            "Integration %s returned status %d: %s",
            integration.id,
            response.status_code,
            error_text[:200],
        )
        return DispatchOutcome(
            integration_id=integration.id,
            platform=platform,
            success=False,
            status_code=response.status_code,
            reason=f"{platform} webhook failed: {response.status_code} - {error_text}",
        )

    logger.debug("Successfully sent notification to integration %s", integration.id)
    return DispatchOutcome(
        integration_id=integration.id,
        platform=platform,
        success=True,
        status_code=response.status_code,
    )


def _host_of(url: str) -> str:
    try:
        return urlparse(url).hostname or "?"
    except ValueError:
        return "?"
