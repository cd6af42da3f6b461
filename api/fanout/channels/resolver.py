"""Resolve the integrations that should receive a notification."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fanout.errors import ResolutionError
from fanout.models.integration import WorkspaceIntegration

logger = logging.getLogger(__name__)


async def resolve_integrations(
    db: AsyncSession,
    workspace_id: str,
    notification_type: str,
) -> list[WorkspaceIntegration]:
    """
    Return the active integrations of a workspace subscribed to a notification type.

    The database filters on workspace and active flag; subscription matching
    happens here because notification_types is a JSON column and array
    containment is not portable across backends.

    An empty list is a valid answer. Database failures raise ResolutionError.
    """
    try:
        result = await db.execute(
            select(WorkspaceIntegration)
            .where(
                WorkspaceIntegration.workspace_id == workspace_id,
                WorkspaceIntegration.is_active.is_(True),
            )
            .order_by(WorkspaceIntegration.created_at)
        )
        integrations = list(result.scalars().all())
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Error fetching integrations for workspace %s: %s", workspace_id, exc)
        raise ResolutionError("Failed to fetch integrations") from exc

    return [
        integration
        for integration in integrations
        if notification_type in (integration.notification_types or [])
    ]
