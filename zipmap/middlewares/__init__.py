from __future__ import annotations

from .cors_headers import CORS_HEADERS, CorsHeadersMiddleware
from .request_id import RequestIdMiddleware, request_id_ctx_var

__all__ = [
    "CORS_HEADERS",
    "CorsHeadersMiddleware",
    "RequestIdMiddleware",
    "request_id_ctx_var",
]
