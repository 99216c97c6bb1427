"""Middleware and handlers for protocol-compliant error responses."""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from app.errors import ErrorCode, GameError


logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert GameError exceptions to protocol-compliant responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except GameError as e:
            return e.to_response()
        except Exception as e:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            error = GameError(ErrorCode.INTERNAL_ERROR, str(e))
            return error.to_response()


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Map request body validation failures to INVALID_REQUEST."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    error = GameError(ErrorCode.INVALID_REQUEST, f"Invalid request: {details}")
    return error.to_response()
