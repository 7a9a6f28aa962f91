# relaypanel/shared/middleware/exception_middleware.py

"""
Middleware for centralized exception handling.

This module defines middleware that intercepts exceptions and formats
appropriate error responses for the client.
"""

import time
import logging
import traceback
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from relaypanel.domain.exceptions import DomainException

# Configure logger
logger = logging.getLogger(__name__)

STATUS_BY_INTERNAL_CODE = {
    "RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "SYNC_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "STORAGE_OPERATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "LOOKUP_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures specific exceptions and formats the response accordingly.
    """

    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except DomainException as exc:
            # Domain exceptions: mapping from pure exception to HTTP code based on 'internal_code'
            logger.warning(
                f"Domain exception: {str(exc)} | Code: {exc.internal_code} | "
                f"Path: {request.url.path}"
            )
            status_code = STATUS_BY_INTERNAL_CODE.get(exc.internal_code, status.HTTP_400_BAD_REQUEST)

            return JSONResponse(
                status_code=status_code,
                content={
                    "detail": str(exc),
                    "code": exc.internal_code,
                    "errors": getattr(exc, "details", {})
                }
            )

        except Exception as exc:
            # Unhandled exceptions
            if self.environment == "production":
                error_message = "Internal server error"
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | "
                    f"Client: {request.client.host if request.client else 'N/A'}"
                )
            else:
                error_message = str(exc)
                stack_trace = traceback.format_exc()
                logger.exception(
                    f"Unhandled exception: {str(exc)} | "
                    f"Path: {request.url.path} | "
                    f"Client: {request.client.host if request.client else 'N/A'}\n"
                    f"Traceback: {stack_trace}"
                )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": error_message,
                    "code": "INTERNAL_SERVER_ERROR"
                }
            )
