"""
Salon Backend — Request ID Middleware
=======================================

Every request gets a correlation ID that appears in log lines, error bodies
and the X-Request-ID response header. A client-supplied X-Request-ID is
reused when it is a short token of safe characters; anything else is
replaced so that arbitrary header content never reaches the logs.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def current_request_id(request: Request) -> str:
    """
    The request's correlation ID, also outside the ContextVar's scope.

    The catch-all Exception handler runs in ServerErrorMiddleware, outside
    RequestIDMiddleware, after the ContextVar has been reset; request.state
    shares the ASGI scope and still carries the ID there.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def resolve_request_id(supplied: str) -> str:
    if supplied and _SAFE_REQUEST_ID.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
