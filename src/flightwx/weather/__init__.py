"""Weather decoding and forecast resolution.

Decodes METAR observations, classifies flight categories, and resolves
TAF documents into hourly timelines with icing and wind shear flags.
"""

from flightwx.weather.flight_category import (
    CATEGORY_LETTERS,
    category_letter,
    classify,
    is_worse,
    worst_category,
)
from flightwx.weather.forecast_resolver import ActiveBase, ForecastResolver, WindowSummary
from flightwx.weather.icing import is_icing, observation_icing_risk
from flightwx.weather.metar_parser import METARParser, parse_metar
from flightwx.weather.models import (
    VARIABLE,
    ChangeKind,
    CloudLayer,
    FlightCategory,
    ForecastConditions,
    ForecastDocument,
    ForecastPeriod,
    HourlyForecast,
    Observation,
    SkyCover,
    Wind,
)
from flightwx.weather.station_cache import StationCache
from flightwx.weather.taf_document import parse_forecast_document, parse_taf_visibility
from flightwx.weather.wind_shear import detect_wind_shear

__all__ = [
    "ActiveBase",
    "CATEGORY_LETTERS",
    "ChangeKind",
    "CloudLayer",
    "FlightCategory",
    "ForecastConditions",
    "ForecastDocument",
    "ForecastPeriod",
    "ForecastResolver",
    "HourlyForecast",
    "METARParser",
    "Observation",
    "SkyCover",
    "StationCache",
    "VARIABLE",
    "Wind",
    "WindowSummary",
    "category_letter",
    "classify",
    "detect_wind_shear",
    "is_icing",
    "is_worse",
    "observation_icing_risk",
    "parse_forecast_document",
    "parse_metar",
    "parse_taf_visibility",
    "worst_category",
]
