"""Public notification fan-out endpoint."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from fanout.channels.dispatcher import dispatch_notifications
from fanout.channels.resolver import resolve_integrations
from fanout.channels.validate import parse_notification_request
from fanout.config import settings
from fanout.database import get_db
from fanout.errors import NotifierError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

NO_INTEGRATIONS_MESSAGE = "No active integrations for this notification type"

NOTIFICATION_PATHS = ("/send-webhook-notification", "/v1/notifications/send")


def _json(content: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


@router.options(NOTIFICATION_PATHS[0], include_in_schema=False)
@router.options(NOTIFICATION_PATHS[1], include_in_schema=False)
async def notification_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(NOTIFICATION_PATHS[0], summary="Fan a notification out to workspace integrations")
@router.post(NOTIFICATION_PATHS[1], summary="Fan a notification out to workspace integrations")
async def send_webhook_notification(request: Request, db: AsyncSession = Depends(get_db)):
    try:
        raw = await request.body()
        notification = parse_notification_request(
            raw, strict_types=settings.strict_notification_types
        )
        logger.info(
            "Received notification request: workspace=%s type=%s title=%r",
            notification.workspace_id,
            notification.notification_type,
            notification.title,
        )

        integrations = await resolve_integrations(
            db, notification.workspace_id, notification.notification_type
        )
        logger.info(
            "Found %d relevant integrations for %s",
            len(integrations),
            notification.notification_type,
        )
        if not integrations:
            return _json({"success": True, "sent": 0, "message": NO_INTEGRATIONS_MESSAGE})

        summary = await dispatch_notifications(integrations, notification)
        return _json(summary.to_response())

    except NotifierError as exc:
        if exc.status_code >= 500:
            logger.error("Notification request failed: %s", exc.message)
        else:
            logger.info("Rejected notification request: %s", exc.message)
        return _json(exc.to_body(), status_code=exc.status_code)
    except Exception as exc:
        logger.exception("Error processing webhook notification")
        return _json({"error": str(exc) or "Unknown error"}, status_code=500)
