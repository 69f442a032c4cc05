"""
Notekeeper — Request ID Middleware
====================================

What:  Assigns a short correlation ID to every request and echoes it back
       in the `X-Request-ID` response header.
How:   Stores the ID in a ContextVar so loggers and exception handlers can
       read it without having the Request object; `RequestIDLogFilter`
       copies it onto every log record as `%(request_id)s`.
When:  Outermost application middleware; runs before routing.

Client-supplied IDs are accepted only if short and made of safe characters,
so a caller cannot inject arbitrary text into log lines.
"""

import logging
import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDLogFilter(logging.Filter):
    """Adds `request_id` to every record so the log format can include it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Reuse a well-formed client X-Request-ID, otherwise generate one
        2. Store it in the ContextVar and in request.state
        3. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get("X-Request-ID", "")
        rid = incoming if _SAFE_REQUEST_ID.match(incoming) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
