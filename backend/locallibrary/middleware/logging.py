"""
LocalLibrary — Request Logging Middleware
==========================================

What:  One access log line per HTTP request.
How:   Times the rest of the stack, then logs method, path, status and
       duration tagged with the request id. Redirects also log their
       target, so a form submission shows where it landed:

           POST /catalog/genre/create 302 12.4ms [a1b2c3d4] -> /catalog/genre/<id>

       The level follows the status class: 5xx ERROR, 4xx WARNING,
       otherwise INFO.
Who:   Applied to every request except health probes.

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from locallibrary.middleware.request_id import request_id_var

logger = logging.getLogger("locallibrary.access")

UNLOGGED_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the catalog pages."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        status = response.status_code
        target = response.headers.get("location", "")
        client = request.client.host if request.client else "unknown"

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms [%s]%s",
            request.method,
            request.url.path,
            status,
            elapsed_ms,
            rid,
            f" -> {target}" if target else "",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": client,
                "redirect_to": target or None,
            },
        )
        return response
