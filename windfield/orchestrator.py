# ABOUTME: Refresh orchestrator coordinating resolver, cache, and GeoJSON output
# ABOUTME: Runs one cycle at a time and tracks offline state between cycles

import logging
import threading
from typing import Optional

from windfield.cache.manager import CacheManager
from windfield.config import WindFieldSettings
from windfield.debug import debug_log
from windfield.output.geojson import build_feature_collection
from windfield.wind.models import ResolutionRun
from windfield.wind.resolver import WindFieldResolver

log = logging.getLogger(__name__)


class WindOrchestrator:
    """Schedules resolution cycles and serves the latest results"""

    def __init__(self, settings: WindFieldSettings, resolver: Optional[WindFieldResolver] = None):
        self.settings = settings
        self.resolver = resolver or WindFieldResolver(settings)
        self.cache = CacheManager(
            ttl_seconds=settings.refresh_minutes * 60,
            offline_retry_seconds=settings.offline_retry_seconds,
        )
        self._in_flight = threading.Lock()

    def refresh(self) -> Optional[ResolutionRun]:
        """
        Run one resolution cycle and store the outcome.

        Returns:
            The ResolutionRun, or None if another cycle was already running
        """
        if not self._in_flight.acquire(blocking=False):
            debug_log("Refresh skipped - previous cycle still running", "ORCHESTRATOR")
            return None

        try:
            print(f"[WIND] Resolving {len(self.settings.sites)} sites...", flush=True)
            run = self.resolver.run()

            for name, error in run.failures.items():
                print(f"[WIND] {name} dropped: {error}", flush=True)

            if self.settings.sites and not run.results:
                print("[WIND] No sites resolved - marking offline", flush=True)
                self.cache.set_offline()
                return run

            self.cache.set_results(run.results)
            print(f"[WIND] Cached {len(run.results)} sites", flush=True)
            return run
        finally:
            self._in_flight.release()

    def get_cached_data(self) -> dict:
        """
        Get current data, refreshing if the cache is stale.

        While offline, a new cycle starts only after the retry window.

        Returns:
            {
                "is_offline": bool,
                "fetched_at": datetime or None,
                "results": tuple of SiteWindResult,
                "feature_collection": GeoJSON dict
            }
        """
        if self.cache.should_refresh():
            self.refresh()

        if self.cache.is_offline():
            results = self.cache.get_last_known_results()
            fetched_at = self.cache.get_last_known_at()
        else:
            results = self.cache.get_results() or ()
            fetched_at = self.cache.get_fetched_at()

        return {
            "is_offline": self.cache.is_offline(),
            "fetched_at": fetched_at,
            "results": results,
            "feature_collection": build_feature_collection(results),
        }

    def run_forever(self, stop_event: threading.Event) -> None:
        """Refresh every refresh_minutes until stop_event is set."""
        interval = self.settings.refresh_minutes * 60
        while not stop_event.is_set():
            try:
                self.refresh()
            except Exception as e:
                log.exception(f"Refresh cycle failed: {e}")
            stop_event.wait(interval)
