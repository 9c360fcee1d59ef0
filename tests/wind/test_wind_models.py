# ABOUTME: Tests for wind data models
# ABOUTME: Validates vector magnitude, bracket index checks, and the site record

import pytest

from windfield.errors import UpstreamError
from windfield.weather.models import Site
from windfield.wind.models import BracketedSample, SampleFailure, SiteWindResult, WindVector

SITE = Site(name="NIY", lon=72.9, lat=2.7)


def make_result(**overrides):
    values = dict(
        site=SITE,
        speed_mps=10.0,
        direction_from=90.0,
        direction_to=270.0,
        render_rotation=180.0,
        time="2025-06-01T14:00",
    )
    values.update(overrides)
    return SiteWindResult(**values)


def test_wind_vector_speed_is_hypot():
    assert WindVector(u=3.0, v=4.0).speed == 5.0


class TestBracketedSample:
    """Tests for BracketedSample validation"""

    def test_valid_bracket(self):
        sample = BracketedSample(1, 2, 0.25)
        assert (sample.k1, sample.k2, sample.weight) == (1, 2, 0.25)

    def test_rejects_reversed_indices(self):
        with pytest.raises(ValueError):
            BracketedSample(2, 1, 0.0)

    def test_rejects_weight_out_of_range(self):
        with pytest.raises(ValueError):
            BracketedSample(0, 1, 1.5)


class TestSiteWindResult:
    """Tests for SiteWindResult"""

    def test_knots_and_label(self):
        """10 m/s is labelled 19.4 kt"""
        result = make_result()
        assert result.speed_kt == pytest.approx(19.4384)
        assert result.label == "19.4 kt"

    def test_as_properties(self):
        props = make_result(wave_height=0.7, sample_count=3).as_properties()

        assert props["name"] == "NIY"
        assert props["wind_from"] == 90.0
        assert props["wind_to"] == 270.0
        assert props["wind_rotation"] == 180.0
        assert props["wind_speed_mps"] == 10.0
        assert props["wind_speed_kt"] == pytest.approx(19.4384)
        assert props["label"] == "19.4 kt"
        assert props["time"] == "2025-06-01T14:00"
        assert props["wave_height"] == 0.7
        assert props["samples"] == 3

    def test_string_representation(self):
        text = str(make_result())
        assert "NIY" in text
        assert "19.4 kt" in text

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            make_result().speed_mps = 1.0

    def test_failures_ignored_in_equality(self):
        failure = SampleFailure(lat=2.8, lon=72.9, error=UpstreamError("HTTP 500", status_code=500))
        assert make_result(failures=(failure,)) == make_result()
        assert "2.8000" in str(failure)
