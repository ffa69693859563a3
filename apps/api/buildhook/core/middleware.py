"""ASGI middleware for the webhook service.

`RequestIdMiddleware` injects or forwards X-Request-ID and stores it in a
ContextVar. The logging layer reads it so every line emitted while handling
a webhook delivery carries the same ID, including the lines that explain
why a delivery was rejected with a bare status code.
"""

import uuid
from contextvars import ContextVar
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Return the current request's ID, or an empty string outside a request."""
    return _request_id_var.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Read or generate X-Request-ID and make it available for the request lifetime.

    GitHub sends its own X-GitHub-Delivery header; when present it is used
    as the request ID so server logs can be matched against the delivery
    log in the repository's webhook settings. An explicit X-Request-ID
    wins over both.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-GitHub-Delivery")
            or str(uuid.uuid4())
        )

        token = _request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response
