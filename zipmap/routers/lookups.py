from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..core.errors import BadRequestError, error_boundary
from ..deps.lookups import get_places_client, get_weather_client
from ..services.openweather import OpenWeatherClient
from ..services.places import GeoapifyPlacesClient

router = APIRouter(tags=["lookups"])

COORDINATES_REQUIRED = "Latitude and longitude are required."


def _require_coordinates(lat: str | None, lon: str | None) -> tuple[str, str]:
    if not lat or not lon:
        raise BadRequestError(COORDINATES_REQUIRED)
    return lat, lon


@router.get("/weather")
async def api_weather(
    lat: str | None = Query(default=None),
    lon: str | None = Query(default=None),
    weather: OpenWeatherClient = Depends(get_weather_client),
):
    lat, lon = _require_coordinates(lat, lon)
    with error_boundary("get_weather", "Failed to fetch weather data."):
        payload = await weather.get_current_weather(lat, lon)
    return JSONResponse(payload)


@router.get("/places")
async def api_places(
    lat: str | None = Query(default=None),
    lon: str | None = Query(default=None),
    places: GeoapifyPlacesClient = Depends(get_places_client),
):
    lat, lon = _require_coordinates(lat, lon)
    with error_boundary("get_places", "Failed to fetch tourist places."):
        results = await places.get_tourist_places(lat, lon)
    return JSONResponse(results)
