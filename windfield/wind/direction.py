# ABOUTME: Bearing-convention math for wind: from/to flips, u/v components, calibration
# ABOUTME: Pure functions, 0 deg = north, 90 deg = east, u = east, v = north

import math
from typing import Sequence

from windfield.wind.models import KNOTS_PER_MPS, WindVector


def normalize_bearing(degrees: float) -> float:
    """Wrap any angle into [0, 360)."""
    wrapped = degrees % 360.0
    # -1e-14 % 360 rounds up to exactly 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def flip_bearing(degrees: float) -> float:
    """Turn a from-bearing into a to-bearing (or back)."""
    return normalize_bearing(degrees + 180.0)


def from_to_vector(speed_mps: float, direction_from: float) -> WindVector:
    """
    Convert meteorological speed + from-bearing to a (u, v) vector.

    The vector points where the wind is going, so the bearing is flipped
    once here and never again downstream.
    """
    direction_to = math.radians(flip_bearing(direction_from))
    return WindVector(
        u=speed_mps * math.sin(direction_to),
        v=speed_mps * math.cos(direction_to),
    )


def vector_to_speed_direction(u: float, v: float) -> tuple[float, float, float]:
    """
    Convert a (u, v) vector back to speed and bearings.

    Returns:
        (speed_mps, direction_to, direction_from)
    """
    speed = math.hypot(u, v)
    direction_to = normalize_bearing(math.degrees(math.atan2(u, v)) + 360.0)
    return speed, direction_to, flip_bearing(direction_to)


def apply_render_calibration(direction_to: float, offset_deg: float) -> float:
    """Add the renderer's fixed icon-rotation offset to a to-bearing."""
    return normalize_bearing(direction_to + offset_deg + 360.0)


def blend_vectors(a: WindVector, b: WindVector, weight: float) -> WindVector:
    """Linear blend from a (weight 0) to b (weight 1)."""
    return WindVector(
        u=a.u + (b.u - a.u) * weight,
        v=a.v + (b.v - a.v) * weight,
    )


def average_vectors(vectors: Sequence[WindVector]) -> WindVector:
    """Component-wise mean. Never average raw speeds or bearings."""
    if not vectors:
        raise ValueError("Cannot average an empty set of wind vectors")
    count = len(vectors)
    return WindVector(
        u=sum(vec.u for vec in vectors) / count,
        v=sum(vec.v for vec in vectors) / count,
    )


def mps_to_knots(speed_mps: float) -> float:
    return speed_mps * KNOTS_PER_MPS


def knots_label(speed_mps: float) -> str:
    """Format m/s as a knot label like '19.4 kt'."""
    return f"{mps_to_knots(speed_mps):.1f} kt"
