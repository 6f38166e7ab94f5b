from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import UpstreamLookupError

logger = logging.getLogger(__name__)


def build_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """One pooled client per process; connections are kept alive between lookups."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))


def raise_for_status(response: httpx.Response, provider: str, context: str) -> None:
    if response.is_success:
        return
    if response.status_code in {401, 403}:
        logger.warning("%s authentication failed for %s", provider, context)
    elif response.status_code >= 500:
        logger.error("%s service error %s during %s", provider, response.status_code, context)
    else:
        logger.error("%s request error %s during %s", provider, response.status_code, context)
    raise UpstreamLookupError(f"{provider} returned HTTP {response.status_code} during {context}")


async def fetch(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any],
    *,
    provider: str,
    context: str,
) -> httpx.Response:
    """Issue a GET, turning transport failures into ``UpstreamLookupError``."""
    try:
        return await client.get(url, params=params)
    except httpx.HTTPError as exc:
        logger.error("%s request failed during %s: %s", provider, context, exc)
        raise UpstreamLookupError(f"{provider} request failed during {context}") from exc


def decode_json(response: httpx.Response, provider: str, context: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        logger.error("%s returned invalid JSON during %s", provider, context)
        raise UpstreamLookupError(f"{provider} returned invalid JSON during {context}") from exc
