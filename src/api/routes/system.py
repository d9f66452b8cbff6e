"""
System endpoints - task introspection and recent log lines
"""

from fastapi import APIRouter, Depends, Query
from typing import Dict, Any

from lifecycle.task_registry import TaskRegistry
from api.dependencies import get_service_container
from services.service_container import ServiceContainer

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/tasks/summary")
async def get_task_summary() -> Dict[str, Any]:
    registry = TaskRegistry.instance()
    return {
        "summary": registry.summary(),
        "total": len(registry.list_all()),
        "active": len(registry.active()),
        "failed": len(registry.failed()),
        "cancelled": len(registry.cancelled())
    }


@router.get("/tasks")
async def get_all_tasks() -> Dict[str, Any]:
    """
    Every tracked task with its status.

    Returns:
        - count: Number of tracked tasks
        - tasks: id, category, description, created_at, status, error
    """
    records = TaskRegistry.instance().list_all()
    tasks = sorted((r.to_dict() for r in records), key=lambda t: t["created_at"])
    return {"count": len(tasks), "tasks": tasks}


@router.get("/logs")
async def get_recent_logs(
    limit: int = Query(100, ge=1, le=1000),
    services: ServiceContainer = Depends(get_service_container)
) -> Dict[str, Any]:
    """Most recent log lines kept by the notifier, oldest first"""
    lines = [line.to_data() for line in services.notifier.recent_logs(limit)]
    return {"count": len(lines), "logs": lines}


@router.get("/status")
async def get_status(services: ServiceContainer = Depends(get_service_container)) -> Dict[str, Any]:
    """Hardware availability and what is currently active"""
    effects = services.effects
    return {
        "leds_enabled": effects.leds_enabled,
        "outputs_enabled": effects.outputs_enabled,
        "resources": len(services.registry.resources()),
        "running_animations": services.dispatcher.animations.running(),
    }
