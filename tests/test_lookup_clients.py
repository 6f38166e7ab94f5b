"""OpenWeatherMap and Geoapify clients against a mocked transport."""

import asyncio
import sys
from pathlib import Path

import httpx
import pytest
from cachetools import TTLCache

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zipmap.core.errors import LookupNotConfigured, UpstreamLookupError
from zipmap.services.openweather import OpenWeatherClient
from zipmap.services.places import GeoapifyPlacesClient


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class Upstream:
    """Records requests and answers with a configurable status and payload."""

    def __init__(self, status: int = 200, payload=None, error: Exception | None = None) -> None:
        self.status = status
        self.payload = payload if payload is not None else {}
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, json=self.payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


OWM_PAYLOAD = {
    "coord": {"lat": 34.05, "lon": -118.24},
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
    "main": {"temp": 72.3, "humidity": 40},
    "name": "Beverly Hills",
    "cod": 200,
}


def build_weather_client(upstream: Upstream, clock: FakeClock | None = None, api_key: str = "owm-key"):
    clock = clock or FakeClock()
    return OpenWeatherClient(
        upstream.client(),
        api_key=api_key,
        url="https://owm.test/data/2.5/weather",
        timezone_resolver=lambda lat, lon: "America/Los_Angeles",
        geo_cache=TTLCache(maxsize=32, ttl=15 * 60, timer=clock),
    )


def build_places_client(upstream: Upstream, clock: FakeClock | None = None, api_key: str = "geo-key"):
    clock = clock or FakeClock()
    return GeoapifyPlacesClient(
        upstream.client(),
        api_key=api_key,
        url="https://geoapify.test/v2/places",
        cache=TTLCache(maxsize=32, ttl=5 * 60, timer=clock),
    )


def test_geocode_builds_geo_result_from_coordinates():
    upstream = Upstream(payload=OWM_PAYLOAD)
    client = build_weather_client(upstream)

    geo = asyncio.run(client.get_geo_data("90210"))

    assert geo.model_dump() == {
        "latitude": 34.05,
        "longitude": -118.24,
        "timezone": "America/Los_Angeles",
    }
    params = upstream.requests[0].url.params
    assert params["zip"] == "90210,us"
    assert params["appid"] == "owm-key"


def test_geocode_is_cached_for_fifteen_minutes():
    upstream = Upstream(payload=OWM_PAYLOAD)
    clock = FakeClock()
    client = build_weather_client(upstream, clock)

    asyncio.run(client.get_geo_data("90210"))
    clock.now = 10 * 60
    asyncio.run(client.get_geo_data("90210"))
    assert len(upstream.requests) == 1

    clock.now = 15 * 60 + 1
    asyncio.run(client.get_geo_data("90210"))
    assert len(upstream.requests) == 2


def test_geocode_returns_none_for_unknown_zip_and_does_not_cache():
    upstream = Upstream(status=404, payload={"cod": "404", "message": "city not found"})
    client = build_weather_client(upstream)

    assert asyncio.run(client.get_geo_data("00000")) is None
    assert asyncio.run(client.get_geo_data("00000")) is None
    assert len(upstream.requests) == 2


@pytest.mark.parametrize("status", [401, 429, 500, 503])
def test_geocode_provider_failures_raise(status):
    upstream = Upstream(status=status, payload={"message": "nope"})
    client = build_weather_client(upstream)

    with pytest.raises(UpstreamLookupError):
        asyncio.run(client.get_geo_data("90210"))
    assert "90210" not in client.geo_cache


def test_geocode_payload_without_coordinates_raises():
    client = build_weather_client(Upstream(payload={"cod": 200}))

    with pytest.raises(UpstreamLookupError):
        asyncio.run(client.get_geo_data("90210"))


def test_geocode_transport_error_raises_lookup_error():
    upstream = Upstream(error=httpx.ConnectError("connection refused"))
    client = build_weather_client(upstream)

    with pytest.raises(UpstreamLookupError):
        asyncio.run(client.get_geo_data("90210"))


def test_missing_weather_key_is_reported():
    upstream = Upstream(payload=OWM_PAYLOAD)
    client = build_weather_client(upstream, api_key="")

    with pytest.raises(LookupNotConfigured):
        asyncio.run(client.get_geo_data("90210"))
    with pytest.raises(LookupNotConfigured):
        asyncio.run(client.get_current_weather("34.05", "-118.24"))
    assert upstream.requests == []


def test_current_weather_passes_payload_through_in_imperial_units():
    upstream = Upstream(payload=OWM_PAYLOAD)
    client = build_weather_client(upstream)

    payload = asyncio.run(client.get_current_weather("34.05", "-118.24"))

    assert payload == OWM_PAYLOAD
    params = upstream.requests[0].url.params
    assert params["lat"] == "34.05"
    assert params["lon"] == "-118.24"
    assert params["units"] == "imperial"


def test_current_weather_is_not_cached():
    upstream = Upstream(payload=OWM_PAYLOAD)
    client = build_weather_client(upstream)

    asyncio.run(client.get_current_weather("1", "2"))
    asyncio.run(client.get_current_weather("1", "2"))

    assert len(upstream.requests) == 2


def test_current_weather_failure_raises():
    client = build_weather_client(Upstream(status=502))

    with pytest.raises(UpstreamLookupError):
        asyncio.run(client.get_current_weather("1", "2"))


GEOAPIFY_PAYLOAD = {
    "type": "FeatureCollection",
    "features": [
        {"properties": {"name": f"Spot {i}", "address_line2": f"{i} Main St", "distance": i * 10}}
        for i in range(1, 8)
    ],
}


def test_places_request_and_mapping():
    upstream = Upstream(payload=GEOAPIFY_PAYLOAD)
    client = build_places_client(upstream)

    places = asyncio.run(client.get_tourist_places("34.05", "-118.24"))

    assert len(places) == 5
    assert places[0] == {"name": "Spot 1", "address": "1 Main St"}
    params = upstream.requests[0].url.params
    assert params["categories"] == "tourism.attraction"
    assert params["filter"] == "circle:-118.24,34.05,5000"
    assert params["bias"] == "proximity:-118.24,34.05"
    assert params["limit"] == "5"
    assert params["apiKey"] == "geo-key"


def test_places_missing_fields_map_to_none():
    upstream = Upstream(payload={"features": [{"properties": {}}]})
    client = build_places_client(upstream)

    assert asyncio.run(client.get_tourist_places("1", "2")) == [{"name": None, "address": None}]


def test_places_cache_uses_literal_coordinate_text():
    upstream = Upstream(payload=GEOAPIFY_PAYLOAD)
    clock = FakeClock()
    client = build_places_client(upstream, clock)

    asyncio.run(client.get_tourist_places("1.5", "2"))
    clock.now = 4 * 60
    asyncio.run(client.get_tourist_places("1.5", "2"))
    assert len(upstream.requests) == 1

    asyncio.run(client.get_tourist_places("1.50", "2"))
    assert len(upstream.requests) == 2

    clock.now = 5 * 60 + 1
    asyncio.run(client.get_tourist_places("1.5", "2"))
    assert len(upstream.requests) == 3


def test_places_failure_raises_and_is_not_cached():
    upstream = Upstream(status=500, payload={"error": "boom"})
    client = build_places_client(upstream)

    with pytest.raises(UpstreamLookupError):
        asyncio.run(client.get_tourist_places("1", "2"))
    assert len(client.cache) == 0


def test_missing_places_key_is_reported():
    client = build_places_client(Upstream(payload=GEOAPIFY_PAYLOAD), api_key="")

    with pytest.raises(LookupNotConfigured):
        asyncio.run(client.get_tourist_places("1", "2"))
