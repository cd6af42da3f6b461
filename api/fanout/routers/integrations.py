"""CRUD routes for workspace integrations."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fanout.auth import require_scope
from fanout.channels.detect import detect_platform
from fanout.channels.validate import (
    VALID_PLATFORMS,
    suggest_platform,
    validate_integration,
    validate_notification_types,
)
from fanout.database import get_db
from fanout.models.integration import WorkspaceIntegration
from fanout.response import paginated_response, single_response
from fanout.schemas.integration import (
    IntegrationCreate,
    IntegrationResponse,
    IntegrationUpdate,
)
from fanout.security import is_safe_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces/{workspace_id}/integrations", tags=["integrations"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_platform(platform: str, webhook_url: str) -> str:
    if platform not in VALID_PLATFORMS:
        suggestion = suggest_platform(platform)
        hint = f" Did you mean '{suggestion}'?" if suggestion else ""
        raise HTTPException(status_code=400, detail=f"Invalid platform: {platform}.{hint}")

    # A generic webhook pointing at a known chat service gets that service's formatting
    if platform == "webhook" and isinstance(webhook_url, str):
        return detect_platform(webhook_url)
    return platform


def _check_destination(platform: str, webhook_url: str) -> None:
    error = validate_integration(platform, webhook_url)
    if error:
        raise HTTPException(status_code=400, detail=error)
    safe, reason = is_safe_url(webhook_url)
    if not safe:
        raise HTTPException(status_code=400, detail=f"Invalid webhook_url: {reason}")


def _check_types(types: list[str]) -> None:
    error = validate_notification_types(types)
    if error:
        raise HTTPException(status_code=400, detail=error)


async def _get_integration(
    workspace_id: str, integration_id: uuid.UUID, db: AsyncSession
) -> WorkspaceIntegration:
    result = await db.execute(
        select(WorkspaceIntegration).where(
            WorkspaceIntegration.id == integration_id,
            WorkspaceIntegration.workspace_id == workspace_id,
        )
    )
    integration = result.scalar_one_or_none()
    if not integration:
        raise HTTPException(status_code=404, detail="Integration not found")
    return integration


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("", status_code=201, summary="Register an integration")
async def create_integration(
    workspace_id: str,
    body: IntegrationCreate,
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_scope("integrations")),
):
    platform = _resolve_platform(body.platform, body.webhook_url)
    _check_destination(platform, body.webhook_url)
    _check_types(body.notification_types)

    integration = WorkspaceIntegration(
        workspace_id=workspace_id,
        platform=platform,
        webhook_url=body.webhook_url,
        notification_types=list(dict.fromkeys(body.notification_types)),
        label=body.label,
        is_active=True,
    )
    db.add(integration)
    await db.commit()
    await db.refresh(integration)

    logger.info(
        "Created %s integration %s for workspace %s", platform, integration.id, workspace_id
    )
    return single_response(IntegrationResponse.model_validate(integration))


@router.get("", summary="List integrations")
async def list_integrations(
    workspace_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_scope("integrations")),
):
    scope = WorkspaceIntegration.workspace_id == workspace_id
    total = (
        await db.execute(select(func.count()).select_from(WorkspaceIntegration).where(scope))
    ).scalar()
    result = await db.execute(
        select(WorkspaceIntegration)
        .where(scope)
        .order_by(WorkspaceIntegration.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    items = [IntegrationResponse.model_validate(i) for i in result.scalars().all()]
    return paginated_response(items, total, limit, offset)


@router.patch("/{integration_id}", summary="Update an integration")
async def update_integration(
    workspace_id: str,
    integration_id: uuid.UUID,
    body: IntegrationUpdate,
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_scope("integrations")),
):
    integration = await _get_integration(workspace_id, integration_id, db)
    update_data = body.model_dump(exclude_unset=True)

    if "platform" in update_data or "webhook_url" in update_data:
        webhook_url = update_data.get("webhook_url") or integration.webhook_url
        platform = _resolve_platform(update_data.get("platform") or integration.platform, webhook_url)
        _check_destination(platform, webhook_url)
        update_data["platform"] = platform
        update_data["webhook_url"] = webhook_url

    if "notification_types" in update_data:
        types = update_data["notification_types"] or []
        _check_types(types)
        update_data["notification_types"] = list(dict.fromkeys(types))

    for field, value in update_data.items():
        if value is None and field != "label":
            continue
        setattr(integration, field, value)

    await db.commit()
    await db.refresh(integration)

    return single_response(IntegrationResponse.model_validate(integration))


@router.delete("/{integration_id}", status_code=204, summary="Remove an integration")
async def delete_integration(
    workspace_id: str,
    integration_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_scope("integrations")),
):
    integration = await _get_integration(workspace_id, integration_id, db)
    await db.delete(integration)
    await db.commit()
    logger.info("Deleted integration %s from workspace %s", integration_id, workspace_id)
