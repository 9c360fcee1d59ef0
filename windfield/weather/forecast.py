# ABOUTME: Open-Meteo client for hourly wind (and optional wave) forecast series
# ABOUTME: One GET per point, raising typed errors for HTTP and payload problems

import logging
import requests
from datetime import datetime, timedelta, timezone

from windfield.errors import MalformedDataError, UpstreamError
from windfield.weather.models import ForecastSeries

log = logging.getLogger(__name__)

WIND_FIELDS = ["wind_speed_10m", "wind_direction_10m"]
WAVE_FIELD = "wind_wave_height"


class ForecastClient:
    """
    Client for Open-Meteo hourly forecasts.

    Two upstream flavors share one response shape: the atmospheric
    forecast endpoint (wind only) and the marine endpoint, which adds
    wind-wave height. No retries here; the scheduler re-runs the cycle.
    """

    FORECAST = "forecast"
    MARINE = "marine"

    BASE_URLS = {
        FORECAST: "https://api.open-meteo.com/v1/forecast",
        MARINE: "https://marine-api.open-meteo.com/v1/marine",
    }

    def __init__(self, flavor: str = FORECAST, base_url: str = None, timeout: float = 10.0):
        if flavor not in self.BASE_URLS:
            raise ValueError(f"Unknown forecast flavor: {flavor!r}")
        self.flavor = flavor
        self.base_url = base_url or self.BASE_URLS[flavor]
        self.timeout = timeout

    @property
    def hourly_fields(self) -> list[str]:
        if self.flavor == self.MARINE:
            return WIND_FIELDS + [WAVE_FIELD]
        return list(WIND_FIELDS)

    def fetch(self, lat: float, lon: float) -> ForecastSeries:
        """
        Fetch the hourly series for one point.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            ForecastSeries with aligned arrays

        Raises:
            UpstreamError: non-2xx status or transport failure
            MalformedDataError: missing, misaligned, or unparseable arrays
        """
        params = {
            "latitude": f"{lat:.6f}",
            "longitude": f"{lon:.6f}",
            "hourly": ",".join(self.hourly_fields),
            "wind_speed_unit": "ms",
            "timezone": "auto",
        }

        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Open-Meteo request failed for ({lat}, {lon}): {e}") from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                f"Open-Meteo HTTP {response.status_code} for ({lat}, {lon})",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedDataError(f"Open-Meteo returned non-JSON body: {e}") from e

        return self._parse_response(data)

    def _parse_response(self, data: dict) -> ForecastSeries:
        """Parse the hourly block into a ForecastSeries."""
        if not isinstance(data, dict):
            raise MalformedDataError("Response body is not a JSON object")

        hourly = data.get("hourly")
        if not isinstance(hourly, dict):
            raise MalformedDataError("Response has no hourly block")

        times = self._required_array(hourly, "time")
        speeds = self._required_array(hourly, "wind_speed_10m")
        directions = self._required_array(hourly, "wind_direction_10m")

        waves = hourly.get(WAVE_FIELD)
        if waves is not None and not isinstance(waves, list):
            raise MalformedDataError(f"{WAVE_FIELD} is not an array")

        if not times:
            raise MalformedDataError("Hourly series is empty")

        lengths = {len(times), len(speeds), len(directions)}
        if waves is not None:
            lengths.add(len(waves))
        if len(lengths) != 1:
            raise MalformedDataError(
                f"Hourly arrays have mismatched lengths: time={len(times)}, "
                f"speed={len(speeds)}, direction={len(directions)}"
            )

        offset = self._utc_offset(data.get("utc_offset_seconds"))
        timestamps = [self._parse_time(label, offset) for label in times]
        for earlier, later in zip(timestamps, timestamps[1:]):
            if later <= earlier:
                raise MalformedDataError("Hourly timestamps are not strictly increasing")

        return ForecastSeries(
            times=[str(label) for label in times],
            timestamps=timestamps,
            wind_speed=[self._number(v, "wind_speed_10m") for v in speeds],
            wind_direction=[self._number(v, "wind_direction_10m") for v in directions],
            wave_height=[self._number(v, WAVE_FIELD) for v in waves] if waves is not None else None,
        )

    def _required_array(self, hourly: dict, name: str) -> list:
        values = hourly.get(name)
        if not isinstance(values, list):
            raise MalformedDataError(f"Required hourly field missing: {name}")
        return values

    def _number(self, value, name: str):
        # Nulls are kept; they only matter if the interpolator needs that index
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise MalformedDataError(f"Non-numeric value in {name}: {value!r}") from e

    def _utc_offset(self, value) -> timezone:
        """Build the response zone from utc_offset_seconds (missing means UTC)."""
        if value is None:
            return timezone.utc
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedDataError(f"utc_offset_seconds is not a number: {value!r}")
        try:
            return timezone(timedelta(seconds=value))
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedDataError(f"Invalid utc_offset_seconds: {value!r}") from e

    def _parse_time(self, label, offset: timezone) -> float:
        """
        Convert an hourly time label to UTC epoch seconds.

        With timezone=auto Open-Meteo sends local wall-clock labels like
        '2025-06-01T14:00' and reports the zone via utc_offset_seconds.
        """
        if isinstance(label, (int, float)) and not isinstance(label, bool):
            return float(label)
        try:
            parsed = datetime.fromisoformat(str(label))
        except ValueError as e:
            raise MalformedDataError(f"Unparseable hourly time: {label!r}") from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=offset)
        return parsed.timestamp()
