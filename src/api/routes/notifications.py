"""
Notification endpoint - inbound host notifications

The host forwards the notifications other modules broadcast; every trigger
whose predicates match fires its actions.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from api.schemas.gpio import NotificationRequest, Reply
from services.service_container import ServiceContainer

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("", response_model=Reply, response_model_exclude_none=True)
async def post_notification(
    request: NotificationRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> Reply:
    fired = services.dispatcher.triggers.handle_notification(
        request.notification, request.sender, request.payload
    )
    return Reply(error=False, data={"fired": fired})
