# ABOUTME: In-memory cache for the latest resolved wind cycle
# ABOUTME: Each cycle replaces the previous one; last known results survive outages

from datetime import datetime, timezone
from typing import Optional

from windfield.wind.models import SiteWindResult


class CacheManager:
    """
    Holds one refresh cycle of SiteWindResult records.

    Fresh results: returned until the TTL expires.
    Last known results: kept across stale and offline cycles for display.
    """

    def __init__(self, ttl_seconds: int = 600, offline_retry_seconds: int = 60):
        self.ttl_seconds = ttl_seconds
        self.offline_retry_seconds = offline_retry_seconds

        # Latest cycle: results and fetch timestamp
        self._results_cache: Optional[dict] = None

        # Offline state
        self._is_offline: bool = False
        self._last_known_results: tuple[SiteWindResult, ...] = ()
        self._last_known_at: Optional[datetime] = None
        self._offline_at: Optional[datetime] = None

    # ==================== Results Cache ====================

    def set_results(self, results: tuple[SiteWindResult, ...]) -> None:
        """
        Store a new cycle. Replaces, never merges with, the previous one.

        Args:
            results: Resolved records for this cycle
        """
        fetched_at = datetime.now(timezone.utc)
        self._results_cache = {
            "results": tuple(results),
            "fetched_at": fetched_at,
        }
        self._is_offline = False
        self._last_known_results = tuple(results)
        self._last_known_at = fetched_at
        self._offline_at = None

    def get_results(self) -> Optional[tuple[SiteWindResult, ...]]:
        """Get the cached cycle if fresh, else None."""
        if self.is_stale():
            return None
        return self._results_cache["results"]

    def get_fetched_at(self) -> Optional[datetime]:
        if self._results_cache:
            return self._results_cache.get("fetched_at")
        return None

    def is_stale(self) -> bool:
        """Check if the cached cycle needs a refresh."""
        if self._results_cache is None:
            return True

        fetched_at = self._results_cache.get("fetched_at")
        if fetched_at is None:
            return True

        age = datetime.now(timezone.utc) - fetched_at
        return age.total_seconds() > self.ttl_seconds

    def should_refresh(self) -> bool:
        """Stale, and not inside the retry window after a failed cycle."""
        if not self.is_stale():
            return False
        if self._is_offline and self._offline_at is not None:
            waited = datetime.now(timezone.utc) - self._offline_at
            return waited.total_seconds() >= self.offline_retry_seconds
        return True

    # ==================== Offline State ====================

    def set_offline(self) -> None:
        """Mark the upstream as offline, keeping the last known results."""
        self._is_offline = True
        self._offline_at = datetime.now(timezone.utc)
        self._results_cache = None

    def is_offline(self) -> bool:
        return self._is_offline

    def get_last_known_results(self) -> tuple[SiteWindResult, ...]:
        """Get the last successful cycle (for offline display)."""
        return self._last_known_results

    def get_last_known_at(self) -> Optional[datetime]:
        return self._last_known_at

    def clear(self) -> None:
        """Clear all caches."""
        self._results_cache = None
        self._is_offline = False
        self._last_known_results = ()
        self._last_known_at = None
        self._offline_at = None
