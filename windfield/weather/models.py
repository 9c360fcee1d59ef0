# ABOUTME: Data models for sites and raw hourly forecast series
# ABOUTME: Provides structured representation of upstream wind and wave arrays

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Site:
    """A named point to resolve wind for (WGS84 degrees)"""
    name: str
    lon: float
    lat: float

    def __post_init__(self):
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Latitude must be -90..90, got {self.lat}")
        if not -180 <= self.lon <= 180:
            raise ValueError(f"Longitude must be -180..180, got {self.lon}")

    def __str__(self) -> str:
        return f"{self.name} ({self.lat:.4f}, {self.lon:.4f})"


@dataclass
class ForecastSeries:
    """Hourly series from the forecast API, parallel arrays aligned by index"""
    times: list[str]              # ISO labels as returned upstream
    timestamps: list[float]       # UTC epoch seconds, strictly increasing
    wind_speed: list[Optional[float]]      # m/s
    wind_direction: list[Optional[float]]  # degrees the wind blows FROM
    wave_height: Optional[list[Optional[float]]] = None  # m, marine flavor only

    def __len__(self) -> int:
        return len(self.timestamps)

    @property
    def has_waves(self) -> bool:
        return self.wave_height is not None
