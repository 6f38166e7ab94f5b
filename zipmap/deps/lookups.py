from __future__ import annotations

from fastapi import Request

from ..services.openweather import OpenWeatherClient
from ..services.places import GeoapifyPlacesClient


def get_weather_client(request: Request) -> OpenWeatherClient:
    return request.app.state.weather_client


def get_places_client(request: Request) -> GeoapifyPlacesClient:
    return request.app.state.places_client
