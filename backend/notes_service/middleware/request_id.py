"""
Notes Service — Request ID Middleware
======================================

What:  Assigns a correlation ID to each incoming request and echoes it in the
       `X-Request-ID` response header.
How:   Uses the client's `X-Request-ID` when present, otherwise a short
       generated UUID; stores it in a ContextVar for loggers and span
       attributes, and on `request.state` for handlers.
When:  Runs before the access logger, so every log line and every operation
       span of a request carries the same ID.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
