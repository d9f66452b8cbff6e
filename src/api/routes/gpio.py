"""
GPIO endpoints - the action vocabulary over HTTP

GET  /api/v1/gpio?verb=SET&name=desk_lamp&value=1&time=500
POST /api/v1/gpio   {"action": "TOGGLE", "name": "fan"}

Besides the dispatcher verbs two read-only verbs exist:
- GET      snapshot of one resource, scene or animation
- GET_ALL  snapshots of everything
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from api.dependencies import get_service_container
from api.middleware.error_handler import ResourceNotFoundError, ActionRejectedError
from api.schemas.gpio import ActionRequest, Reply
from managers.config_validator import validate_action
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/gpio", tags=["GPIO"])


def handle_action_request(request: ActionRequest, services: ServiceContainer) -> Reply:
    verb = request.verb.strip().upper()
    registry = services.registry

    if verb == "GET_ALL":
        return Reply(error=False, data=registry.snapshot_all())

    if verb == "GET":
        target = registry.lookup(request.name)
        if target is None:
            raise ResourceNotFoundError(request.name)
        return Reply(error=False, data=target.snapshot())

    action = validate_action(request.to_raw(), context="http")
    if action is None:
        raise ActionRejectedError(f"Invalid action \"{request.verb}\"", details={"verb": request.verb})

    if action.name and registry.lookup(action.name) is None:
        raise ResourceNotFoundError(action.name)

    if not services.dispatcher.dispatch(action):
        raise ActionRejectedError(
            f"{action.verb.name} could not be applied to \"{action.name}\"",
            details={"verb": action.verb.name, "name": action.name}
        )

    target = registry.lookup(action.name)
    return Reply(error=False, data=target.snapshot() if target is not None else None)


@router.get("", response_model=Reply, response_model_exclude_none=True)
async def get_action(
    verb: Optional[str] = Query(None),
    action: Optional[str] = Query(None, description="Alias of verb"),
    name: Optional[str] = Query(None),
    value: Optional[float] = Query(None),
    time: Optional[float] = Query(None),
    off_time: Optional[float] = Query(None),
    master_value: Optional[float] = Query(None),
    delay: Optional[float] = Query(None),
    notification: Optional[str] = Query(None),
    payload: Optional[str] = Query(None),
    services: ServiceContainer = Depends(get_service_container)
) -> Reply:
    """Run one action given as query parameters"""
    raw = {
        "verb": verb if verb is not None else action,
        "name": name,
        "value": value,
        "time": time,
        "off_time": off_time,
        "master_value": master_value,
        "delay": delay,
        "notification": notification,
        "payload": payload,
    }
    try:
        request = ActionRequest.model_validate({k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    return handle_action_request(request, services)


@router.post("", response_model=Reply, response_model_exclude_none=True)
async def post_action(
    request: ActionRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> Reply:
    """Run one action given as a JSON body"""
    return handle_action_request(request, services)
