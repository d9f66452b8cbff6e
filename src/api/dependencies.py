"""
API Dependencies - Service container access for FastAPI endpoints

Pattern:
1. main_asyncio.py builds the ServiceContainer during initialization
2. main_asyncio.py calls set_service_container() after creation
3. API endpoints use the get_service_container() dependency via Depends()

Example:
    @router.post("/gpio")
    async def post_action(services: ServiceContainer = Depends(get_service_container)):
        return services.dispatcher.dispatch(...)
"""

from typing import Optional
from fastapi import HTTPException, status
from services.service_container import ServiceContainer


# Set by main_asyncio.py (or a test) during initialization
_service_container: Optional[ServiceContainer] = None


def set_service_container(services: Optional[ServiceContainer]) -> None:
    """Store the service container for API access (None detaches it)"""
    global _service_container
    _service_container = services


async def get_service_container() -> ServiceContainer:
    """
    FastAPI dependency for accessing the service container.

    Raises:
        HTTPException: 503 Service Unavailable if services are not initialized
    """
    if _service_container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service container not initialized. Hardware may still be starting."
        )
    return _service_container
