"""OpenWeatherMap client: ZIP geocoding and current conditions.

Both lookups use the provider's "current weather" endpoint. Geocoding reads
only the coordinates from it and derives the timezone locally; results are
cached per ZIP5 because a ZIP's location does not change.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from cachetools import TTLCache
from pydantic import ValidationError

from ..core.errors import LookupNotConfigured, UpstreamLookupError
from ..schemas.lookup import GeoResult, ProviderWeather
from .timezones import TimezoneResolver
from .upstream import decode_json, fetch, raise_for_status

logger = logging.getLogger(__name__)

PROVIDER = "OpenWeatherMap"
DEFAULT_URL = "https://api.openweathermap.org/data/2.5/weather"
GEO_TTL_SECONDS = 15 * 60


class OpenWeatherClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_key: str,
        timezone_resolver: TimezoneResolver,
        url: str = DEFAULT_URL,
        geo_cache: Optional[TTLCache] = None,
    ) -> None:
        self.http = http
        self.api_key = api_key
        self.url = url
        self.resolve_timezone = timezone_resolver
        self.geo_cache = geo_cache if geo_cache is not None else TTLCache(maxsize=4096, ttl=GEO_TTL_SECONDS)

    def _require_key(self) -> str:
        if not self.api_key:
            raise LookupNotConfigured("OpenWeatherMap API key not configured")
        return self.api_key

    async def get_geo_data(self, zip5: str) -> Optional[GeoResult]:
        """Resolve a 5-digit ZIP to coordinates and timezone.

        Returns ``None`` when the provider does not know the ZIP. Any other
        provider failure raises ``UpstreamLookupError`` and nothing is cached.
        """
        api_key = self._require_key()
        cached = self.geo_cache.get(zip5)
        if cached is not None:
            return cached

        params = {"zip": f"{zip5},us", "appid": api_key}
        response = await fetch(self.http, self.url, params, provider=PROVIDER, context="zip geocoding")
        if response.status_code == 404:
            logger.warning("Zip code not found: %s", zip5)
            return None
        raise_for_status(response, PROVIDER, "zip geocoding")

        data = decode_json(response, PROVIDER, "zip geocoding")
        try:
            coord = ProviderWeather.model_validate(data).coord
        except ValidationError as exc:
            raise UpstreamLookupError("OpenWeatherMap geocoding payload is malformed") from exc
        if coord is None:
            raise UpstreamLookupError("OpenWeatherMap geocoding payload has no coordinates")

        result = GeoResult(
            latitude=coord.lat,
            longitude=coord.lon,
            timezone=self.resolve_timezone(coord.lat, coord.lon),
        )
        self.geo_cache[zip5] = result
        logger.debug("Geocoded %s to %s,%s (%s)", zip5, result.latitude, result.longitude, result.timezone)
        return result

    async def get_current_weather(self, lat: str | float, lon: str | float) -> dict[str, Any]:
        """Current conditions in imperial units, returned exactly as the provider sent them."""
        api_key = self._require_key()
        params = {"lat": lat, "lon": lon, "appid": api_key, "units": "imperial"}
        response = await fetch(self.http, self.url, params, provider=PROVIDER, context="current weather")
        raise_for_status(response, PROVIDER, "current weather")
        return decode_json(response, PROVIDER, "current weather")
