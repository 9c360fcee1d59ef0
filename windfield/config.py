# ABOUTME: Application configuration including site list and forecast API settings
# ABOUTME: Env-driven Config plus an immutable settings snapshot handed to the resolver

import json
import os
from dataclasses import dataclass
from dotenv import load_dotenv

from windfield.weather.models import Site

load_dotenv()


# Seavion NIY site
DEFAULT_SITES_JSON = '[{"name": "NIY", "lon": 72.93960976474132, "lat": 2.686273100482876}]'


class Config:
    """Application configuration"""

    # Sites to resolve, JSON list of {"name", "lon", "lat"}
    SITES_JSON = os.getenv("WIND_SITES", DEFAULT_SITES_JSON)

    # Upstream forecast API
    FORECAST_FLAVOR = os.getenv("FORECAST_FLAVOR", "forecast")  # "forecast" or "marine"
    FORECAST_API_URL = os.getenv("FORECAST_API_URL", "")  # empty = flavor default
    REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

    # Arrow icon points east at 0 rotation, so north-up needs -90
    RENDER_OFFSET_DEG = float(os.getenv("RENDER_OFFSET_DEG", "-90"))

    # Spatial sampling: ~0.1 deg is about one model grid cell
    OFFSET_PATTERN = os.getenv("OFFSET_PATTERN", "plus")  # "plus" or "center"
    OFFSET_DELTA_DEG = float(os.getenv("OFFSET_DELTA_DEG", "0.1"))

    # "interpolate" blends the two bracketing hours, "nearest" picks one
    TIME_MODE = os.getenv("TIME_MODE", "interpolate")

    # Fan-out limits
    MAX_SITE_WORKERS = int(os.getenv("MAX_SITE_WORKERS", "4"))
    MAX_SAMPLE_WORKERS = int(os.getenv("MAX_SAMPLE_WORKERS", "5"))
    RUN_TIMEOUT_SECONDS = float(os.getenv("RUN_TIMEOUT_SECONDS", "60"))

    # Refresh cadence for the scheduler
    REFRESH_MINUTES = int(os.getenv("REFRESH_MINUTES", "10"))
    # After a cycle resolves nothing, wait this long before requests retry
    OFFLINE_RETRY_SECONDS = int(os.getenv("OFFLINE_RETRY_SECONDS", "60"))

    # Debug mode
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"


def parse_sites(raw: str) -> list[Site]:
    """
    Parse the WIND_SITES JSON list into Site objects.

    Args:
        raw: JSON text like '[{"name": "NIY", "lon": 72.9, "lat": 2.7}]'

    Returns:
        List of Site in the order given

    Raises:
        ValueError: on invalid JSON, missing keys, or duplicate names
    """
    try:
        entries = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"WIND_SITES is not valid JSON: {e}") from e

    if not isinstance(entries, list):
        raise ValueError("WIND_SITES must be a JSON list")

    sites = []
    seen = set()
    for entry in entries:
        try:
            site = Site(name=str(entry["name"]), lon=float(entry["lon"]), lat=float(entry["lat"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid site entry {entry!r}: {e}") from e
        if site.name in seen:
            raise ValueError(f"Duplicate site name: {site.name}")
        seen.add(site.name)
        sites.append(site)
    return sites


@dataclass(frozen=True)
class WindFieldSettings:
    """Immutable snapshot of everything the resolution pipeline needs"""
    sites: tuple[Site, ...] = ()
    flavor: str = "forecast"
    base_url: str = ""
    request_timeout_seconds: float = 10.0
    render_offset_deg: float = -90.0
    offset_pattern: str = "plus"
    offset_delta_deg: float = 0.1
    time_mode: str = "interpolate"
    max_site_workers: int = 4
    max_sample_workers: int = 5
    run_timeout_seconds: float | None = 60.0
    refresh_minutes: int = 10
    offline_retry_seconds: int = 60

    def __post_init__(self):
        if self.offset_pattern not in ("plus", "center"):
            raise ValueError(f"offset_pattern must be 'plus' or 'center', got {self.offset_pattern!r}")
        if self.max_site_workers < 1 or self.max_sample_workers < 1:
            raise ValueError("Worker counts must be at least 1")
        if self.offset_delta_deg < 0:
            raise ValueError(f"offset_delta_deg must be >= 0, got {self.offset_delta_deg}")

    @classmethod
    def from_config(cls, config=Config) -> "WindFieldSettings":
        """Build settings from the env-driven Config class."""
        return cls(
            sites=tuple(parse_sites(config.SITES_JSON)),
            flavor=config.FORECAST_FLAVOR,
            base_url=config.FORECAST_API_URL,
            request_timeout_seconds=config.REQUEST_TIMEOUT_SECONDS,
            render_offset_deg=config.RENDER_OFFSET_DEG,
            offset_pattern=config.OFFSET_PATTERN,
            offset_delta_deg=config.OFFSET_DELTA_DEG,
            time_mode=config.TIME_MODE,
            max_site_workers=config.MAX_SITE_WORKERS,
            max_sample_workers=config.MAX_SAMPLE_WORKERS,
            run_timeout_seconds=config.RUN_TIMEOUT_SECONDS or None,
            refresh_minutes=config.REFRESH_MINUTES,
            offline_retry_seconds=config.OFFLINE_RETRY_SECONDS,
        )
