"""Tests for the forecast document adapter."""

import json
from datetime import UTC, datetime

import pytest

from flightwx.weather.models import VARIABLE, ChangeKind, SkyCover
from flightwx.weather.taf_document import (
    ceiling_from_clouds,
    parse_clouds,
    parse_forecast_document,
    parse_period,
    parse_taf_visibility,
)

T0 = int(datetime(2025, 3, 12, 12, 0, tzinfo=UTC).timestamp())
HOUR = 3600


def api_payload() -> list[dict]:
    """Build a response shaped like the aviation weather API."""
    return [
        {
            "icaoId": "EFHK",
            "issueTime": "2025-03-12T11:30:00Z",
            "rawTAF": "TAF EFHK 121130Z 1212/1312 24012KT 9999 BKN030 ...",
            "fcsts": [
                {
                    "timeFrom": T0,
                    "timeTo": T0 + 24 * HOUR,
                    "fcstChange": None,
                    "probability": None,
                    "wdir": 240,
                    "wspd": 12,
                    "wgst": None,
                    "visib": "6+",
                    "wxString": None,
                    "clouds": [{"cover": "BKN", "base": 3000}],
                },
                {
                    "timeFrom": T0 + 2 * HOUR,
                    "timeTo": T0 + 24 * HOUR,
                    "timeBec": T0 + 4 * HOUR,
                    "fcstChange": "BECMG",
                    "visib": "",
                    "clouds": [{"cover": "OVC", "base": 800}],
                },
                {
                    "timeFrom": T0 + 3 * HOUR,
                    "timeTo": T0 + 6 * HOUR,
                    "fcstChange": "TEMPO",
                    "probability": 40,
                    "visib": 1.5,
                    "wxString": "-SHRA BR",
                    "clouds": [],
                },
                {"fcstChange": "XX", "timeFrom": T0},
                {"fcstChange": "FM"},
                "not a period",
            ],
        }
    ]


class TestParseVisibility:
    """Tests for parse_taf_visibility()."""

    @pytest.mark.parametrize(
        ("visib", "expected"),
        [
            ("6+", 10000),
            ("P6SM", 10000),
            ("3", 4828),
            ("1.5", 2414),
            (1.5, 2414),
            (0.25, 402),
            (None, None),
            ("", None),
            ("abc", None),
        ],
    )
    def test_values(self, visib: object, expected: float | None) -> None:
        """Test API visibility conversion to meters."""
        assert parse_taf_visibility(visib) == expected

    @pytest.mark.parametrize(
        ("visib", "expected"),
        [
            ("1/2", 805),
            ("1 1/2", 2414),
            ("M1/4", 402),
            ("3/4SM", 1207),
            ("1/0", None),
        ],
    )
    def test_fractions(self, visib: str, expected: float | None) -> None:
        """Test fractional and mixed-number statute miles."""
        assert parse_taf_visibility(visib) == expected

    @pytest.mark.parametrize(
        "visib", ["nan", "inf", "-inf", float("nan"), float("inf"), 10**400, "1e999", True]
    )
    def test_non_finite(self, visib: object) -> None:
        """Test values that are not finite numbers are treated as not given."""
        assert parse_taf_visibility(visib) is None

    def test_fractional_tempo_lowers_visibility(self) -> None:
        """Test a fractional TEMPO visibility is kept, not inherited."""
        doc = parse_forecast_document(
            [
                {
                    "fcsts": [
                        {"timeFrom": T0, "visib": "6+"},
                        {"fcstChange": "TEMPO", "timeFrom": T0, "visib": "1/2"},
                    ]
                }
            ]
        )
        assert doc is not None
        assert doc.periods[1].conditions.visibility == 805


class TestParseClouds:
    """Tests for cloud conversion."""

    def test_clouds(self) -> None:
        """Test cover and base conversion."""
        clouds = [{"cover": "FEW", "base": 1500}, {"cover": "OVC", "base": 700}]
        layers = parse_clouds(clouds)
        assert [layer.cover for layer in layers] == [SkyCover.FEW, SkyCover.OVERCAST]
        assert ceiling_from_clouds(clouds) == 700

    def test_unknown_cover_skipped(self) -> None:
        """Test unknown cover codes are skipped."""
        assert parse_clouds([{"cover": "???", "base": 1000}, "junk"]) == ()
        assert parse_clouds(None) == ()

    def test_cavok_cover_has_no_ceiling(self) -> None:
        """Test CAVOK entries carry no ceiling."""
        assert ceiling_from_clouds([{"cover": "CAVOK"}]) is None


class TestParsePeriod:
    """Tests for parse_period()."""

    def test_variable_wind(self) -> None:
        """Test VRB wind direction."""
        period = parse_period({"timeFrom": T0, "wdir": "VRB", "wspd": 3})
        assert period is not None
        assert period.conditions.wind is not None
        assert period.conditions.wind.direction == VARIABLE

    def test_no_speed_means_no_wind(self) -> None:
        """Test a period without speed has no wind group."""
        period = parse_period({"timeFrom": T0, "fcstChange": "BECMG", "wdir": 120})
        assert period is not None
        assert period.conditions.wind is None

    def test_missing_start(self) -> None:
        """Test a period without start time is skipped."""
        assert parse_period({"fcstChange": "TEMPO"}) is None

    @pytest.mark.parametrize("start", [1e20, -1e20, 10**30, float("nan"), float("inf")])
    def test_unusable_start(self, start: float) -> None:
        """Test an out-of-range or non-finite start time skips the period."""
        assert parse_period({"fcstChange": "TEMPO", "timeFrom": start}) is None

    def test_non_finite_fields_dropped(self) -> None:
        """Test non-finite values are treated as not given."""
        period = parse_period(
            {
                "timeFrom": T0,
                "timeTo": float("inf"),
                "probability": float("nan"),
                "wspd": float("nan"),
                "visib": float("nan"),
                "clouds": [{"cover": "BKN", "base": float("inf")}],
            }
        )
        assert period is not None
        assert period.end is None
        assert period.probability is None
        assert period.conditions.wind is None
        assert period.conditions.visibility is None
        assert period.conditions.clouds[0].base is None
        assert period.conditions.ceiling is None


class TestParseForecastDocument:
    """Tests for parse_forecast_document()."""

    def test_full_document(self) -> None:
        """Test an API response converts to a document."""
        doc = parse_forecast_document(api_payload())

        assert doc is not None
        assert doc.station == "EFHK"
        assert doc.issue_time == datetime(2025, 3, 12, 11, 30, tzinfo=UTC)
        assert doc.raw is not None and doc.raw.startswith("TAF EFHK")
        assert [p.kind for p in doc.periods] == [
            ChangeKind.BASE,
            ChangeKind.BECMG,
            ChangeKind.TEMPO,
        ]

    def test_period_fields(self) -> None:
        """Test period conversion details."""
        doc = parse_forecast_document(api_payload())
        assert doc is not None
        base, becmg, tempo = doc.periods

        assert base.conditions.visibility == 10000
        assert base.conditions.ceiling == 3000
        assert base.conditions.wind is not None
        assert base.conditions.wind.speed == 12
        assert base.start == datetime(2025, 3, 12, 12, 0, tzinfo=UTC)

        assert becmg.conditions.visibility is None
        assert becmg.becoming_end == datetime(2025, 3, 12, 16, 0, tzinfo=UTC)
        assert becmg.conditions.ceiling == 800

        assert tempo.probability == 40
        assert tempo.is_probable_tempo is True
        assert tempo.conditions.weather == ("-SHRA", "BR")
        assert tempo.conditions.clouds == ()
        assert tempo.conditions.visibility == 2414

    def test_single_object(self) -> None:
        """Test a bare station object is accepted."""
        doc = parse_forecast_document(api_payload()[0])
        assert doc is not None
        assert len(doc.periods) == 3

    @pytest.mark.parametrize("payload", [None, [], {}, [{"fcsts": None}], "TAF"])
    def test_unusable_payload(self, payload: object) -> None:
        """Test payloads without forecasts give None."""
        assert parse_forecast_document(payload) is None

    def test_json_with_nan(self) -> None:
        """Test a response containing NaN and huge timestamps still decodes."""
        payload = json.loads(
            '[{"fcsts": ['
            '{"fcstChange": null, "timeFrom": 1700000000, "visib": NaN},'
            '{"fcstChange": "TEMPO", "timeFrom": 1e20, "visib": 1}'
            "]}]"
        )
        doc = parse_forecast_document(payload)

        assert doc is not None
        assert len(doc.periods) == 1
        assert doc.periods[0].conditions.visibility is None

    def test_empty_periods(self) -> None:
        """Test a forecast with an empty period list."""
        doc = parse_forecast_document([{"fcsts": []}])
        assert doc is not None
        assert doc.periods == ()
