"""
Salon Backend — Access Log Middleware
=======================================

One line per request on the "salon.access" logger:

    POST /api/stylists 201 84.2ms [a1b2c3d4] route=/api/stylists

`route` is the matched path template (e.g. /api/stylists/{stylist_id}/active),
which groups requests for the same operation regardless of the id. The level
follows the status class: 5xx → ERROR, 4xx → WARNING, otherwise INFO.

Health probes and photo downloads are not logged. Form bodies carry stylist
contact details and are never logged either.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("salon.access")

QUIET_PREFIXES = ("/health", "/api/files/")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        route = request.scope.get("route")
        template = getattr(route, "path", path)
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] route=%s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            template,
            extra={
                "request_id": rid,
                "route": template,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
