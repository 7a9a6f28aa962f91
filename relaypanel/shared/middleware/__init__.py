# relaypanel/shared/middleware/__init__.py

from relaypanel.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from relaypanel.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware

# Export all for easy imports
__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
]
