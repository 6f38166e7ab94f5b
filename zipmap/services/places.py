from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from cachetools import TTLCache

from ..core.errors import LookupNotConfigured, UpstreamLookupError
from ..schemas.lookup import PlaceResult
from .upstream import decode_json, fetch, raise_for_status

logger = logging.getLogger(__name__)

PROVIDER = "Geoapify"
DEFAULT_URL = "https://api.geoapify.com/v2/places"
PLACES_TTL_SECONDS = 5 * 60
CATEGORY = "tourism.attraction"
RADIUS_METERS = 5000
MAX_RESULTS = 5


def _map_feature(feature: dict[str, Any]) -> dict[str, Any]:
    properties = feature.get("properties") or {}
    place = PlaceResult(name=properties.get("name"), address=properties.get("address_line2"))
    return place.model_dump()


class GeoapifyPlacesClient:
    """Nearby tourist attractions, nearest first, cached per ``"lat,lon"`` key."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_key: str,
        url: str = DEFAULT_URL,
        cache: Optional[TTLCache] = None,
    ) -> None:
        self.http = http
        self.api_key = api_key
        self.url = url
        self.cache = cache if cache is not None else TTLCache(maxsize=4096, ttl=PLACES_TTL_SECONDS)

    async def get_tourist_places(self, lat: str | float, lon: str | float) -> list[dict[str, Any]]:
        if not self.api_key:
            raise LookupNotConfigured("GEOAPIFY_API_KEY not configured")

        # The key is the coordinate text as received; "1.50" and "1.5" are
        # different entries.
        key = f"{lat},{lon}"
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        params = {
            "categories": CATEGORY,
            "filter": f"circle:{lon},{lat},{RADIUS_METERS}",
            "bias": f"proximity:{lon},{lat}",
            "limit": MAX_RESULTS,
            "apiKey": self.api_key,
        }
        response = await fetch(self.http, self.url, params, provider=PROVIDER, context="tourist places")
        raise_for_status(response, PROVIDER, "tourist places")

        data = decode_json(response, PROVIDER, "tourist places")
        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, list):
            raise UpstreamLookupError("Geoapify places payload has no feature list")

        places = [_map_feature(feature) for feature in features[:MAX_RESULTS]]
        self.cache[key] = places
        return list(places)
