from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GeoResult(BaseModel):
    latitude: float
    longitude: float
    timezone: str


class PlaceResult(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None


# OpenWeatherMap "current weather" payload. Only the fields this service or the
# dashboard reads are declared; everything else is kept as-is.
class Coord(BaseModel):
    model_config = ConfigDict(extra="allow")

    lat: float
    lon: float


class WeatherCondition(BaseModel):
    model_config = ConfigDict(extra="allow")

    description: Optional[str] = None
    icon: Optional[str] = None


class MainReadings(BaseModel):
    model_config = ConfigDict(extra="allow")

    temp: Optional[float] = None


class ProviderWeather(BaseModel):
    model_config = ConfigDict(extra="allow")

    coord: Optional[Coord] = None
    weather: list[WeatherCondition] = Field(default_factory=list)
    main: Optional[MainReadings] = None
    cod: Optional[int | str] = None
