"""
Species Catalog Backend — Request Logging Middleware
====================================================

What:  One access-log line per HTTP request.
How:   Measures wall time around the downstream app and logs method, path,
       status, duration, request id and client address.
When:  Added before RequestIDMiddleware, so it runs inside it and sees the id.

Log level follows the status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies (comment text, species descriptions) and Authorization /
Cookie headers are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("species_catalog.access")

# Probed every few seconds by orchestrators; not worth a log line each time
_QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
