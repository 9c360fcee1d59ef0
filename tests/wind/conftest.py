# ABOUTME: Shared fakes for wind pipeline tests
# ABOUTME: A scripted forecast client keyed by rounded coordinates

import threading

import pytest

from windfield.errors import MalformedDataError, UpstreamError
from windfield.weather.models import ForecastSeries

T0 = 1_748_736_000.0  # 2025-06-01T00:00Z


class FakeForecastClient:
    """
    Returns scripted series per (lat, lon).

    Unknown points raise UpstreamError; an Exception instance as the
    scripted value is raised instead of returned.
    """

    def __init__(self, responses=None, default=None):
        self.responses = {self._key(lat, lon): value for (lat, lon), value in (responses or {}).items()}
        self.default = default
        self.calls = []
        self._lock = threading.Lock()

    @staticmethod
    def _key(lat, lon):
        return round(lat, 6), round(lon, 6)

    def fetch(self, lat, lon):
        with self._lock:
            self.calls.append((lat, lon))
        value = self.responses.get(self._key(lat, lon), self.default)
        if value is None:
            raise UpstreamError(f"HTTP 500 for ({lat}, {lon})", status_code=500)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_client():
    """Factory for FakeForecastClient."""
    return FakeForecastClient


@pytest.fixture
def constant_series():
    """Factory for a two-hour series starting at T0 with the same wind at both hours."""
    def make(speed, direction_from, wave_height=None):
        return ForecastSeries(
            times=["2025-06-01T00:00", "2025-06-01T01:00"],
            timestamps=[T0, T0 + 3600],
            wind_speed=[speed, speed],
            wind_direction=[direction_from, direction_from],
            wave_height=[wave_height, wave_height] if wave_height is not None else None,
        )
    return make


@pytest.fixture
def upstream_error():
    return UpstreamError("HTTP 502", status_code=502)


@pytest.fixture
def malformed_error():
    return MalformedDataError("Required hourly field missing: wind_speed_10m")
