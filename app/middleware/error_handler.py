"""Global error handling"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import traceback
import logging

from app.utils.errors import ContactError

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Global error handler middleware"""

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            logger.error(f"Unhandled error: {exc}")
            logger.error(traceback.format_exc())

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Unexpected error. Please try again in a moment."}
            )


async def contact_error_handler(request: Request, exc: ContactError):
    """Map a failed submission attempt to its status and `{error}` body"""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response()
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register error handling on the application"""
    app.add_exception_handler(ContactError, contact_error_handler)
    app.add_middleware(ErrorHandlerMiddleware)
