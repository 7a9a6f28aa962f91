# relaypanel/shared/middleware/logging_middleware.py

"""
Middleware for HTTP request logging.

Every request gets a request/response line. Mutating calls under /api
(each of which waits for a relay sync) are logged with their duration;
failures and server errors are logged as warnings.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Configure logger
logger = logging.getLogger(__name__)

SYNCING_METHODS = {"POST", "PUT", "DELETE"}
API_PREFIX = "/api/"


def is_syncing_request(request: Request) -> bool:
    return request.method in SYNCING_METHODS and request.url.path.startswith(API_PREFIX)


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request logging.
    """

    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else "N/A"
        if self.environment == "production":
            logger.info(f"Request: {request.method} {request.url.path}")
        else:
            logger.info(f"Request: {request.method} {request.url.path} | Client: {client_host}")

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            # Mapped to an error response by the exception middleware
            logger.warning(
                f"Request failed: {request.method} {request.url.path} | "
                f"{type(exc).__name__}: {exc} | Time: {time.time() - start_time:.4f}s"
            )
            raise
        process_time = time.time() - start_time

        summary = f"{response.status_code} for {request.method} {request.url.path} | Time: {process_time:.4f}s"
        if response.status_code >= 500:
            logger.warning(f"Server error: {summary}")
        elif is_syncing_request(request):
            logger.info(f"Registry/relay operation: {summary}")
        else:
            logger.info(f"Response: {summary}")

        return response
