from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from typing import Any, Mapping
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger("zipmap.request")

# Probes and scrapes are logged at DEBUG so they don't drown out API traffic.
QUIET_PATHS = frozenset({"/health", "/metrics"})


def gateway_request_id(scope: Mapping[str, Any]) -> str | None:
    """API Gateway's own request id, present when running behind Mangum."""
    event = scope.get("aws.event")
    if not isinstance(event, Mapping):
        return None
    context = event.get("requestContext")
    if not isinstance(context, Mapping):
        return None
    value = context.get("requestId")
    return str(value) if value else None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id and log its outcome.

    The id is taken from the incoming header, then from the API Gateway event,
    and generated otherwise. It is echoed back on the response.
    """

    def __init__(self, app, header_name: str = "X-Request-ID") -> None:  # type: ignore[override]
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = (
            request.headers.get(self.header_name)
            or gateway_request_id(request.scope)
            or str(uuid4())
        )
        token = request_id_ctx_var.set(request_id)
        request.state.request_id = request_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            response.headers[self.header_name] = request_id
            response.headers.setdefault("X-Response-Time", f"{elapsed_ms:.2f}ms")
            level = logging.DEBUG if request.url.path in QUIET_PATHS else logging.INFO
            logger.log(
                level,
                "request.completed",
                extra={
                    "extra_data": {
                        "method": request.method,
                        "path": request.url.path,
                        "status": response.status_code,
                        "duration_ms": elapsed_ms,
                    }
                },
            )
        finally:
            request_id_ctx_var.reset(token)
        return response
