"""
Species Catalog Backend — Request ID Middleware
===============================================

What:  Gives every request a short correlation id and echoes it back.
How:   Reuses a client-supplied X-Request-ID when it looks sane, otherwise
       generates one; stores it in a ContextVar for loggers and error
       handlers and in request.state for route handlers.
When:  Runs before RequestLoggingMiddleware so access logs carry the id.

The client components forward the id of a failed call in their toast
logs, so one grep connects a user-visible error to the server log line.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Accept caller ids that are short and log-safe; anything else is replaced
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_.\-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns `request_id_var` for the duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get("X-Request-ID", "")
        rid = supplied if _VALID_REQUEST_ID.match(supplied) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
