"""
Error handling for the API

Every failure leaves the API in the same envelope the successful replies
use: {"error": true, "message": ..., "data": ...}.

Handlers:
- Validation errors (malformed query / body)
- Domain errors (unknown target, action not applicable)
- Anything unexpected (500)
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uuid
from typing import Optional

from api.schemas.gpio import Reply
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class ResourceNotFoundError(DomainError):
    """No resource, scene or animation has this name"""
    def __init__(self, name: Optional[str]):
        super().__init__(
            code="NOT_FOUND",
            message=f"Unable to find a resource, scene or animation named \"{name}\"",
            details={"name": name},
            status_code=404
        )


class ActionRejectedError(DomainError):
    """The action is invalid, or could not be applied to its target"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="ACTION_REJECTED",
            message=message,
            details=details,
            status_code=400
        )


def _envelope(status_code: int, message: str, data: Optional[dict] = None) -> JSONResponse:
    reply = Reply(error=True, message=message, data=data)
    return JSONResponse(status_code=status_code, content=reply.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Pydantic validation errors (bad query or JSON structure)"""
        errors = exc.errors()
        log.warn(f"Validation error: {len(errors)} error(s)", path=request.url.path)

        validation_errors = []
        for error in errors:
            loc = [str(x) for x in error.get("loc", ()) if x not in ("body", "query")]
            validation_errors.append({
                "field": ".".join(loc),
                "message": error.get("msg"),
                "type": error.get("type"),
            })

        return _envelope(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Request validation failed",
            {"validation_errors": validation_errors}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        log.warn(f"Domain error: {exc.code} - {exc.message}", path=request.url.path)
        return _envelope(exc.status_code, exc.message, {"code": exc.code, **exc.details})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        request_id = str(uuid.uuid4())
        log.error(
            f"Unexpected error ({request_id}): {type(exc).__name__}: {exc}",
            path=request.url.path
        )
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            {"request_id": request_id}
        )
