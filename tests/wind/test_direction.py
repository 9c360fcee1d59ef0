# ABOUTME: Tests for bearing conventions and wind vector math
# ABOUTME: Covers the from/to flip, u/v round-trip, averaging, and knot labels

import math

import pytest

from windfield.wind.direction import (
    apply_render_calibration,
    average_vectors,
    blend_vectors,
    flip_bearing,
    from_to_vector,
    knots_label,
    mps_to_knots,
    normalize_bearing,
    vector_to_speed_direction,
)
from windfield.wind.models import WindVector


def angle_diff(a: float, b: float) -> float:
    """Smallest absolute difference between two bearings."""
    return abs((a - b + 180.0) % 360.0 - 180.0)


class TestFromToVector:
    """Tests for from_to_vector"""

    def test_north_wind_blows_south(self):
        """Wind from 0 deg points toward 180: v negative, u zero"""
        vector = from_to_vector(10.0, 0.0)
        assert vector.u == pytest.approx(0.0, abs=1e-9)
        assert vector.v == pytest.approx(-10.0)

    def test_east_wind_blows_west(self):
        """Wind from 90 deg points toward 270: u negative"""
        vector = from_to_vector(5.0, 90.0)
        assert vector.u == pytest.approx(-5.0)
        assert vector.v == pytest.approx(0.0, abs=1e-9)

    def test_southwest_wind_blows_northeast(self):
        """Wind from 225 deg has positive u and v"""
        vector = from_to_vector(math.sqrt(2), 225.0)
        assert vector.u == pytest.approx(1.0)
        assert vector.v == pytest.approx(1.0)

    def test_speed_preserved(self):
        """Vector magnitude equals the input speed"""
        assert from_to_vector(7.3, 123.0).speed == pytest.approx(7.3)


class TestVectorToSpeedDirection:
    """Tests for vector_to_speed_direction"""

    def test_vector_toward_east(self):
        """(u=3, v=0) goes toward 90 and comes from 270"""
        speed, direction_to, direction_from = vector_to_speed_direction(3.0, 0.0)
        assert speed == pytest.approx(3.0)
        assert direction_to == pytest.approx(90.0)
        assert direction_from == pytest.approx(270.0)

    def test_vector_toward_west_is_positive_bearing(self):
        """Negative atan2 results wrap into 0-360"""
        _, direction_to, direction_from = vector_to_speed_direction(-2.0, 0.0)
        assert direction_to == pytest.approx(270.0)
        assert direction_from == pytest.approx(90.0)

    def test_zero_vector(self):
        """Calm wind has zero speed and a bearing still inside 0-360"""
        speed, direction_to, direction_from = vector_to_speed_direction(0.0, 0.0)
        assert speed == 0.0
        assert 0.0 <= direction_to < 360.0
        assert 0.0 <= direction_from < 360.0


class TestRoundTrip:
    """from_to_vector then vector_to_speed_direction reproduces the input"""

    @pytest.mark.parametrize("direction_from", [0.0, 0.5, 45.0, 90.0, 179.9, 180.0, 270.0, 359.9])
    @pytest.mark.parametrize("speed", [0.1, 1.0, 6.0, 25.0])
    def test_round_trip(self, speed, direction_from):
        vector = from_to_vector(speed, direction_from)
        back_speed, direction_to, back_from = vector_to_speed_direction(vector.u, vector.v)

        assert back_speed == pytest.approx(speed, rel=1e-6)
        assert angle_diff(back_from, direction_from) < 1e-6
        assert angle_diff(direction_to, direction_from + 180.0) < 1e-6


class TestBearings:
    """Tests for normalize, flip, and calibration"""

    def test_normalize_wraps_negative_and_large(self):
        assert normalize_bearing(-90.0) == 270.0
        assert normalize_bearing(720.0) == 0.0
        assert normalize_bearing(-1e-14) == 0.0

    def test_flip(self):
        assert flip_bearing(90.0) == 270.0
        assert flip_bearing(270.0) == 90.0

    def test_render_calibration(self):
        """-90 offset turns a to-bearing of 270 into 180"""
        assert apply_render_calibration(270.0, -90.0) == 180.0

    def test_render_calibration_wraps(self):
        assert apply_render_calibration(10.0, -90.0) == 280.0
        assert apply_render_calibration(350.0, 90.0) == 80.0

    def test_zero_offset_is_identity(self):
        assert apply_render_calibration(123.0, 0.0) == 123.0


class TestAveraging:
    """Tests for vector averaging and blending"""

    def test_averaging_identical_vectors_is_identity(self):
        """N copies of one vector average to that vector"""
        vector = WindVector(u=-3.2, v=1.7)
        mean = average_vectors([vector] * 5)
        assert mean.u == pytest.approx(vector.u)
        assert mean.v == pytest.approx(vector.v)

    def test_opposite_vectors_cancel(self):
        """(5, 0) and (-5, 0) average to calm"""
        mean = average_vectors([WindVector(5.0, 0.0), WindVector(-5.0, 0.0)])
        assert mean.u == 0.0
        assert mean.v == 0.0
        assert mean.speed == 0.0

    def test_average_across_north_is_north(self):
        """Winds from 350 and 10 average to ~0, not 180"""
        mean = average_vectors([from_to_vector(5.0, 350.0), from_to_vector(5.0, 10.0)])
        _, _, direction_from = vector_to_speed_direction(mean.u, mean.v)
        assert angle_diff(direction_from, 0.0) < 1e-6

    def test_average_empty_raises(self):
        with pytest.raises(ValueError):
            average_vectors([])

    def test_blend_endpoints(self):
        a = WindVector(1.0, 2.0)
        b = WindVector(3.0, -2.0)
        assert blend_vectors(a, b, 0.0) == a
        assert blend_vectors(a, b, 1.0) == b
        assert blend_vectors(a, b, 0.5) == WindVector(2.0, 0.0)


class TestKnots:
    """Tests for unit conversion and labels"""

    def test_ten_mps_label(self):
        """10 m/s is 19.4 kt"""
        assert knots_label(10.0) == "19.4 kt"

    def test_conversion_factor(self):
        assert mps_to_knots(1.0) == 1.94384
