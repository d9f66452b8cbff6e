"""
FastAPI Application Factory

Assembles the HTTP surface of the engine:
- Routes (gpio actions, inbound notifications, system introspection)
- Exception handlers (uniform {"error", "message", "data"} envelope)
- CORS

The same factory is used by main_asyncio.py and by the tests; the service
container is attached separately through api.dependencies.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional

from api.routes import gpio, notifications, system
from api.middleware.error_handler import register_exception_handlers
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


def create_app(
    title: str = "GPIO Resource Engine",
    description: str = "HTTP control of LEDs, outputs, scenes and animations",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: Optional[list] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title (shown in docs)
        description: API description
        version: API version
        docs_enabled: Enable /docs and /redoc
        cors_origins: CORS allowed origins (default: all)
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    # Dashboards on the LAN call in from arbitrary origins
    if cors_origins is None:
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(gpio.router, prefix="/api/v1")
    app.include_router(notifications.router, prefix="/api/v1")
    app.include_router(system.router, prefix="/api/v1")

    log.debug("Routes registered: gpio (/api/v1/gpio), notifications (/api/v1/notifications), system (/api/v1/system)")

    @app.get("/api/health", tags=["System"], summary="Health check")
    async def health_check():
        return {
            "status": "healthy",
            "service": "gpio-engine-api",
            "version": version
        }

    log.info(f"FastAPI app created: {title} v{version}")
    return app
