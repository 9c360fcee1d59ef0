# ABOUTME: Resolves one site by sampling a small cluster of nearby forecast points
# ABOUTME: Vector-averages the surviving samples to smooth out model grid-cell bias

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from windfield.debug import debug_log
from windfield.errors import NoSamplesError, WindFieldError
from windfield.weather.forecast import ForecastClient
from windfield.weather.models import Site
from windfield.wind.direction import (
    apply_render_calibration,
    average_vectors,
    from_to_vector,
    vector_to_speed_direction,
)
from windfield.wind.interpolation import TemporalInterpolator
from windfield.wind.models import SampleFailure, SiteWindResult

log = logging.getLogger(__name__)

CENTER_ONLY = ((0.0, 0.0),)


def plus_pattern(delta_deg: float = 0.1) -> tuple[tuple[float, float], ...]:
    """Center plus one point north, south, east and west, as (dlat, dlon)."""
    return (
        (0.0, 0.0),
        (delta_deg, 0.0),
        (-delta_deg, 0.0),
        (0.0, delta_deg),
        (0.0, -delta_deg),
    )


def offset_points(site: Site, pattern: Sequence[tuple[float, float]]) -> list[tuple[float, float]]:
    """
    Apply an offset pattern to a site.

    Latitude is clamped at the poles and longitude wrapped across the
    antimeridian so every point stays a valid coordinate.

    Returns:
        List of (lat, lon) in pattern order
    """
    points = []
    for dlat, dlon in pattern:
        lat = min(90.0, max(-90.0, site.lat + dlat))
        lon = (site.lon + dlon + 180.0) % 360.0 - 180.0
        points.append((lat, lon))
    return points


class SpatialSampler:
    """Resolves a site from several independently fetched nearby points"""

    def __init__(
        self,
        client: ForecastClient,
        interpolator: TemporalInterpolator,
        render_offset_deg: float = -90.0,
        offset_pattern: Sequence[tuple[float, float]] = None,
        max_workers: int = 5,
    ):
        self.client = client
        self.interpolator = interpolator
        self.render_offset_deg = render_offset_deg
        self.offset_pattern = plus_pattern() if offset_pattern is None else tuple(offset_pattern)
        self.max_workers = max_workers

    def resolve_site(
        self,
        site: Site,
        offset_pattern: Optional[Sequence[tuple[float, float]]] = None,
        now: Optional[float] = None,
    ) -> SiteWindResult:
        """
        Resolve wind for one site.

        Args:
            site: Site to resolve
            offset_pattern: (dlat, dlon) offsets; defaults to the sampler's pattern
            now: Target instant in epoch seconds; defaults to the interpolator clock

        Returns:
            SiteWindResult averaged over every point that succeeded

        Raises:
            NoSamplesError: if every point failed
        """
        pattern = self.offset_pattern if offset_pattern is None else tuple(offset_pattern)
        if not pattern:
            raise ValueError("Offset pattern must contain at least one point")
        if now is None:
            # One instant for every point of the site
            now = self.interpolator.clock()

        points = offset_points(site, pattern)
        workers = min(self.max_workers, len(points))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"sample-{site.name}") as pool:
            futures = [pool.submit(self._sample_point, lat, lon, now) for lat, lon in points]

        samples = []
        failures = []
        for (lat, lon), future in zip(points, futures):
            try:
                samples.append(future.result())
            except WindFieldError as e:
                log.warning(f"Dropping sample ({lat:.4f}, {lon:.4f}) for {site.name}: {e}")
                failures.append(SampleFailure(lat=lat, lon=lon, error=e))

        if not samples:
            raise NoSamplesError(site, failures)

        mean = average_vectors([vector for vector, _, _ in samples])
        speed, direction_to, direction_from = vector_to_speed_direction(mean.u, mean.v)

        waves = [wave for _, wave, _ in samples if wave is not None]
        wave_height = sum(waves) / len(waves) if waves else None

        debug_log(
            f"{site.name}: {len(samples)}/{len(points)} samples, "
            f"{speed:.2f} m/s from {direction_from:.0f}",
            "SAMPLER",
        )

        return SiteWindResult(
            site=site,
            speed_mps=speed,
            direction_from=direction_from,
            direction_to=direction_to,
            render_rotation=apply_render_calibration(direction_to, self.render_offset_deg),
            time=samples[0][2],
            wave_height=wave_height,
            sample_count=len(samples),
            failures=tuple(failures),
        )

    def _sample_point(self, lat: float, lon: float, now: float):
        """Fetch and interpolate one point, returning (vector, wave_height, time_label)."""
        series = self.client.fetch(lat, lon)
        speed, direction_from, wave_height, label = self.interpolator.sample(series, now)
        return from_to_vector(speed, direction_from), wave_height, label
