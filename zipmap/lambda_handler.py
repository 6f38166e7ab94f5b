"""AWS Lambda entrypoint: API Gateway events are adapted onto the ASGI app.

Mangum runs with the lifespan off, so resources are built on the first
invocation and reused by every later one in the same warm container.
"""

from __future__ import annotations

from typing import Any

from mangum import Mangum

from .main import app, init_state

asgi_handler = Mangum(app, lifespan="off")


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    init_state(app)
    return asgi_handler(event, context)
