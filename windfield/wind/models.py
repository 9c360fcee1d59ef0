# ABOUTME: Data models for wind vectors, time brackets, and resolved site records
# ABOUTME: SiteWindResult is the record handed to the map/rendering layer

import math
from dataclasses import dataclass, field
from typing import Optional

from windfield.weather.models import Site

KNOTS_PER_MPS = 1.94384


@dataclass(frozen=True)
class WindVector:
    """Wind as east (u) and north (v) components in m/s"""
    u: float
    v: float

    @property
    def speed(self) -> float:
        return math.hypot(self.u, self.v)


@dataclass(frozen=True)
class BracketedSample:
    """Two series indices around a target instant and the blend weight toward k2"""
    k1: int
    k2: int
    weight: float

    def __post_init__(self):
        if not 0 <= self.k1 <= self.k2:
            raise ValueError(f"Bracket indices must satisfy 0 <= k1 <= k2, got {self.k1}, {self.k2}")
        if not 0.0 <= self.weight <= 1.0:
            raise ValueError(f"Weight must be 0-1, got {self.weight}")


@dataclass(frozen=True)
class SampleFailure:
    """One offset point that could not be resolved, and why"""
    lat: float
    lon: float
    error: Exception

    def __str__(self) -> str:
        return f"({self.lat:.4f}, {self.lon:.4f}): {self.error}"


@dataclass(frozen=True)
class SiteWindResult:
    """Resolved wind for one site for one refresh cycle"""
    site: Site
    speed_mps: float
    direction_from: float  # degrees true, where the wind comes from
    direction_to: float    # degrees, where the wind goes
    render_rotation: float  # direction_to plus the renderer calibration offset
    time: str
    wave_height: Optional[float] = None
    sample_count: int = 1
    failures: tuple[SampleFailure, ...] = field(default=(), compare=False)

    @property
    def speed_kt(self) -> float:
        return self.speed_mps * KNOTS_PER_MPS

    @property
    def label(self) -> str:
        return f"{self.speed_kt:.1f} kt"

    def as_properties(self) -> dict:
        """Flat record consumed by the map layer."""
        return {
            "name": self.site.name,
            "wind_from": self.direction_from,
            "wind_to": self.direction_to,
            "wind_rotation": self.render_rotation,
            "wind_speed_mps": self.speed_mps,
            "wind_speed_kt": self.speed_kt,
            "label": self.label,
            "time": self.time,
            "wave_height": self.wave_height,
            "samples": self.sample_count,
        }

    def __str__(self) -> str:
        return (
            f"{self.site.name}: {self.label} from {self.direction_from:.0f}° "
            f"({self.sample_count} samples @ {self.time})"
        )


@dataclass(frozen=True)
class ResolutionRun:
    """Outcome of one resolver pass: results plus the sites that were dropped"""
    results: tuple[SiteWindResult, ...] = ()
    failures: dict = field(default_factory=dict)  # site name -> Exception
