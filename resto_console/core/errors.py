"""
Error taxonomy shared by services and the HTTP layer

Services raise these; ``register_exception_handlers`` is the only place
that turns them into status codes and response bodies.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger(__name__)


class ConsoleError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ConsoleError):
    """Missing or malformed input"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: str = None, field: str = None):
        self.field = field
        super().__init__(message)


class AuthError(ConsoleError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotConfiguredError(AuthError):
    """Tenant-scoped operation called without an API key"""

    default_message = "API key is required"


class InvalidCredentials(AuthError):
    # Deliberately says nothing about which part failed
    default_message = "Invalid credentials"


class NotFoundError(ConsoleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DataStoreError(ConsoleError):
    """Underlying database failure; detail stays in the logs"""

    default_message = "Data store error"


async def console_error_handler(request: Request, exc: ConsoleError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            method=request.method,
            error=repr(exc.__cause__ or exc),
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location) or "request"
    message = f"{field}: {first.get('msg', 'invalid value')}"
    logger.info("Request validation failed", path=request.url.path, field=field)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "field": field},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ConsoleError, console_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
