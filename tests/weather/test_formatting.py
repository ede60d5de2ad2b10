"""Tests for display formatting helpers."""

import pytest

from flightwx.weather.formatting import (
    format_ceiling,
    format_visibility_km,
    format_wind,
    is_strong_wind,
)
from flightwx.weather.models import VARIABLE, Wind


class TestFormatting:
    """Tests for formatting helpers."""

    @pytest.mark.parametrize(
        ("ceiling", "expected"),
        [(None, "-"), (800, "800"), (3000, "3k"), (3500, "3.5k"), (12000, "12k")],
    )
    def test_format_ceiling(self, ceiling: int | None, expected: str) -> None:
        """Test ceiling formatting."""
        assert format_ceiling(ceiling) == expected

    @pytest.mark.parametrize(
        ("visibility", "expected"),
        [(None, "-"), (10000, "10+"), (12000, "10+"), (5000, "5"), (800, "0.8")],
    )
    def test_format_visibility(self, visibility: float | None, expected: str) -> None:
        """Test visibility formatting in km."""
        assert format_visibility_km(visibility) == expected

    def test_format_wind(self) -> None:
        """Test wind group formatting."""
        assert format_wind(Wind(270, 15, gust=25)) == "27015G25KT"
        assert format_wind(Wind(VARIABLE, 2)) == "VRB02KT"
        assert format_wind(Wind(5, 8)) == "00508KT"
        assert format_wind(Wind(None, 12)) == "12KT"
        assert format_wind(None) == "-"
        assert format_wind(Wind(270, None)) == "-"

    def test_strong_wind(self) -> None:
        """Test strong wind thresholds are exclusive."""
        assert is_strong_wind(16, None) is True
        assert is_strong_wind(15, 20) is False
        assert is_strong_wind(10, 21) is True
        assert is_strong_wind(None, None) is False
        assert is_strong_wind(12, None, speed_limit=10) is True
