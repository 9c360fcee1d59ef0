# ABOUTME: Picks the forecast sample for "now" from an hourly series
# ABOUTME: Brackets the target instant and blends wind in u/v space, never raw angles

import time
from typing import Optional, Sequence

from windfield.errors import MalformedDataError
from windfield.weather.models import ForecastSeries
from windfield.wind.direction import blend_vectors, from_to_vector, vector_to_speed_direction
from windfield.wind.models import BracketedSample

INTERPOLATE = "interpolate"
NEAREST = "nearest"
TIME_MODES = (INTERPOLATE, NEAREST)


def bracket(timestamps: Sequence[float], now: float) -> BracketedSample:
    """
    Find the adjacent samples straddling `now` and the weight toward the later one.

    Before the first sample the bracket collapses to (0, 0, 0.0); at or
    after the last it collapses to (last, last, 0.0). A collapsed bracket
    always has weight 0.

    Args:
        timestamps: Epoch seconds, strictly increasing
        now: Target instant in epoch seconds

    Returns:
        BracketedSample(k1, k2, weight)
    """
    if not timestamps:
        raise MalformedDataError("Cannot bracket an empty time series")

    last = len(timestamps) - 1
    if now < timestamps[0]:
        return BracketedSample(0, 0, 0.0)

    k1 = 0
    while k1 < last and timestamps[k1 + 1] <= now:
        k1 += 1
    k2 = min(k1 + 1, last)
    if k1 == k2:
        return BracketedSample(k1, k2, 0.0)

    span = max(1.0, timestamps[k2] - timestamps[k1])
    weight = min(1.0, max(0.0, (now - timestamps[k1]) / span))
    return BracketedSample(k1, k2, weight)


def nearest(timestamps: Sequence[float], now: float) -> BracketedSample:
    """Degraded mode: the single sample closest to `now` (earliest on ties)."""
    if not timestamps:
        raise MalformedDataError("Cannot pick from an empty time series")
    best = min(range(len(timestamps)), key=lambda i: abs(timestamps[i] - now))
    return BracketedSample(best, best, 0.0)


def _required(values: Sequence[Optional[float]], index: int, name: str) -> float:
    value = values[index]
    if value is None:
        raise MalformedDataError(f"{name} is null at index {index}")
    return value


def interpolate(series: ForecastSeries, sample: BracketedSample) -> tuple[float, float]:
    """
    Blend wind between the bracket endpoints in vector space.

    Returns:
        (speed_mps, direction_from)
    """
    start = from_to_vector(
        _required(series.wind_speed, sample.k1, "wind_speed_10m"),
        _required(series.wind_direction, sample.k1, "wind_direction_10m"),
    )
    end = from_to_vector(
        _required(series.wind_speed, sample.k2, "wind_speed_10m"),
        _required(series.wind_direction, sample.k2, "wind_direction_10m"),
    )
    blended = blend_vectors(start, end, sample.weight)
    speed, _direction_to, direction_from = vector_to_speed_direction(blended.u, blended.v)
    return speed, direction_from


def interpolate_wave_height(series: ForecastSeries, sample: BracketedSample) -> Optional[float]:
    """Linear wave height between the endpoints, or None when unavailable."""
    if not series.has_waves:
        return None
    start = series.wave_height[sample.k1]
    end = series.wave_height[sample.k2]
    if start is None or end is None:
        return None
    return start + (end - start) * sample.weight


class TemporalInterpolator:
    """Selects the sample for the target instant using one fixed mode"""

    def __init__(self, mode: str = INTERPOLATE, clock=time.time):
        if mode not in TIME_MODES:
            raise ValueError(f"Unknown time mode: {mode!r}")
        self.mode = mode
        self.clock = clock

    def select(self, timestamps: Sequence[float], now: Optional[float] = None) -> BracketedSample:
        if now is None:
            now = self.clock()
        if self.mode == NEAREST:
            return nearest(timestamps, now)
        return bracket(timestamps, now)

    def sample(self, series: ForecastSeries, now: Optional[float] = None) -> tuple[float, float, Optional[float], str]:
        """
        Resolve one series at `now` (defaults to the clock).

        Returns:
            (speed_mps, direction_from, wave_height, time_label)
        """
        selected = self.select(series.timestamps, now)
        speed, direction_from = interpolate(series, selected)
        wave_height = interpolate_wave_height(series, selected)
        # Label the sample with the hour it mostly came from
        label_index = selected.k2 if selected.weight > 0.5 else selected.k1
        return speed, direction_from, wave_height, series.times[label_index]
