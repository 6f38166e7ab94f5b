import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zipmap.services.timezones import CoordinateTimezoneResolver, nautical_zone


class StubFinder:
    def __init__(self, zone):
        self.zone = zone
        self.calls = []

    def timezone_at(self, *, lng, lat):
        self.calls.append((lat, lng))
        return self.zone


@pytest.mark.parametrize(
    "longitude, expected",
    [(0.0, "Etc/GMT"), (-75.0, "Etc/GMT+5"), (135.0, "Etc/GMT-9"), (-180.0, "Etc/GMT+12")],
)
def test_nautical_zone_uses_inverted_posix_sign(longitude, expected):
    assert nautical_zone(longitude) == expected


def test_resolver_returns_polygon_zone():
    finder = StubFinder("America/Los_Angeles")
    resolver = CoordinateTimezoneResolver(finder)

    assert resolver(34.05, -118.24) == "America/Los_Angeles"
    assert finder.calls == [(34.05, -118.24)]


def test_resolver_falls_back_offshore():
    resolver = CoordinateTimezoneResolver(StubFinder(None))

    assert resolver(30.0, -140.0) == "Etc/GMT+9"
