# app/core/errors.py

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

INTERNAL_ERROR = "Internal server error"


# ------------------------------------------------------------
# Service-level errors (raised by app.services, rendered here)
# ------------------------------------------------------------
class ServiceError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidOperation(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class AccessDenied(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


def _detail_from_validation(exc: RequestValidationError) -> str:
    errors = exc.errors() or []
    if not errors:
        return "Request validation failed."

    messages = []
    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", []) if x not in ("body", "query", "path"))
        msg = err.get("msg") or "Invalid input."
        messages.append(f"{field}: {msg}" if field else msg)
    return "; ".join(messages)


def register_error_handlers(app: FastAPI) -> None:
    """
    Every error leaves the API as {"error": "<message>"}.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        if exc.status_code >= 500:
            detail = INTERNAL_ERROR
        return JSONResponse(
            {"error": detail},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"error": _detail_from_validation(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse({"error": INTERNAL_ERROR}, status_code=500)
