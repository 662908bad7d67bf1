"""
Notes Service — Request Logging Middleware
===========================================

What:  One access log line per HTTP request.
How:   Measures the time spent in the rest of the stack and logs method, path,
       status, duration, request ID and client address. The level follows the
       status class: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_service.middleware.request_id import request_id_var

logger = logging.getLogger("notes_service.access")

# Probed every few seconds by orchestrators; not worth a log line each
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
