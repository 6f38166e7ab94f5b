from __future__ import annotations

import logging
from typing import Callable

from timezonefinder import TimezoneFinder

logger = logging.getLogger(__name__)

TimezoneResolver = Callable[[float, float], str]


def nautical_zone(longitude: float) -> str:
    """Etc/GMT zone for coordinates outside every land zone polygon.

    POSIX-style names invert the sign: ``Etc/GMT+5`` is five hours behind UTC.
    """
    offset = round(-longitude / 15)
    if offset == 0:
        return "Etc/GMT"
    return f"Etc/GMT{offset:+d}"


class CoordinateTimezoneResolver:
    """Map a coordinate pair to an IANA zone name.

    Loading the zone polygons is slow, so build one instance at startup and
    share it.
    """

    def __init__(self, finder: TimezoneFinder | None = None) -> None:
        self._finder = finder or TimezoneFinder()

    def __call__(self, latitude: float, longitude: float) -> str:
        zone = self._finder.timezone_at(lng=longitude, lat=latitude)
        if zone:
            return zone
        fallback = nautical_zone(longitude)
        logger.info("No timezone polygon for %s,%s; using %s", latitude, longitude, fallback)
        return fallback
