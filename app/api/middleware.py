"""HTTP middleware for request correlation and structured logging.

Provide middleware to manage request-scoped context variables, specifically
the Request ID, so every log line emitted while serving a probe can be
traced back to the request that caused it.
"""

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Manage request correlation IDs.

    Ensure every request has a unique ID bound to the logging context via
    `structlog.contextvars`, echo it back in the response headers, and log
    completion of each request at debug level.
    """

    async def dispatch(self, request: Request, call_next):
        """Process the request and manage correlation context lifecycle.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler in the chain.

        Returns:
            The HTTP response with the `X-Request-ID` header attached.
        """
        # Residual context from a previous request on this task must not leak.
        clear_contextvars()

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        # Unhandled exceptions propagate to the global exception handler,
        # which still sees the bound context.
        response: Response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
        )

        return response
