# ABOUTME: Resolves wind for every configured site, dropping sites that fail
# ABOUTME: Fans out across sites on a bounded pool with an optional run deadline

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional, Sequence

from windfield.config import WindFieldSettings
from windfield.debug import debug_log
from windfield.errors import WindFieldError
from windfield.weather.forecast import ForecastClient
from windfield.weather.models import Site
from windfield.wind.interpolation import TemporalInterpolator
from windfield.wind.models import ResolutionRun, SiteWindResult
from windfield.wind.sampler import CENTER_ONLY, SpatialSampler, plus_pattern

log = logging.getLogger(__name__)


class WindFieldResolver:
    """Stateless per-cycle resolver for a set of sites"""

    def __init__(
        self,
        settings: WindFieldSettings,
        client: Optional[ForecastClient] = None,
        sampler: Optional[SpatialSampler] = None,
    ):
        self.settings = settings
        if sampler is None:
            client = client or ForecastClient(
                flavor=settings.flavor,
                base_url=settings.base_url or None,
                timeout=settings.request_timeout_seconds,
            )
            pattern = plus_pattern(settings.offset_delta_deg) if settings.offset_pattern == "plus" else CENTER_ONLY
            sampler = SpatialSampler(
                client=client,
                interpolator=TemporalInterpolator(mode=settings.time_mode),
                render_offset_deg=settings.render_offset_deg,
                offset_pattern=pattern,
                max_workers=settings.max_sample_workers,
            )
        self.sampler = sampler

    def resolve_all(self, sites: Optional[Sequence[Site]] = None, now: Optional[float] = None) -> tuple[SiteWindResult, ...]:
        """Resolve every site, returning results only for the ones that succeeded."""
        return self.run(sites, now).results

    def run(self, sites: Optional[Sequence[Site]] = None, now: Optional[float] = None) -> ResolutionRun:
        """
        Resolve every site and report which ones were dropped.

        Args:
            sites: Sites to resolve; defaults to the configured sites
            now: Target instant in epoch seconds; one instant is shared by all sites

        Returns:
            ResolutionRun with results in input order and failures keyed by site name
        """
        sites = tuple(self.settings.sites if sites is None else sites)
        if not sites:
            return ResolutionRun()

        names = [site.name for site in sites]
        if len(set(names)) != len(names):
            raise ValueError(f"Site names must be unique within a run: {names}")

        if now is None:
            now = self.sampler.interpolator.clock()

        started = time.monotonic()
        pool = ThreadPoolExecutor(
            max_workers=min(self.settings.max_site_workers, len(sites)),
            thread_name_prefix="site",
        )
        try:
            futures = {site.name: pool.submit(self.sampler.resolve_site, site, None, now) for site in sites}
            wait(futures.values(), timeout=self.settings.run_timeout_seconds)
        finally:
            # Unstarted sites are cancelled; in-flight fetches end on their own request timeout
            pool.shutdown(wait=False, cancel_futures=True)

        results = []
        failures = {}
        for site in sites:
            future = futures[site.name]
            if not future.done():
                future.cancel()
                error = TimeoutError(f"{site.name} did not finish within {self.settings.run_timeout_seconds}s")
                log.warning(f"Dropping site {site.name}: {error}")
                failures[site.name] = error
                continue
            if future.cancelled():
                error = TimeoutError(f"{site.name} was cancelled at the run deadline")
                log.warning(f"Dropping site {site.name}: {error}")
                failures[site.name] = error
                continue
            try:
                results.append(future.result())
            except WindFieldError as e:
                log.warning(f"Dropping site {site.name}: {e}")
                failures[site.name] = e

        debug_log(
            f"Resolved {len(results)}/{len(sites)} sites in {time.monotonic() - started:.2f}s",
            "RESOLVER",
        )
        return ResolutionRun(results=tuple(results), failures=failures)
