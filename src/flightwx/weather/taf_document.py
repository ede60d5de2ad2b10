"""Adapter for decoded forecast (TAF) documents from the aviation weather API.

The API returns a JSON list with one object per station. Each object holds a
``fcsts`` list of periods:

    {
        "fcstChange": "BECMG",      # null for the initial base period
        "probability": null,        # 30/40 for PROB groups
        "timeFrom": 1700000000,     # epoch seconds
        "timeTo": 1700010800,
        "timeBec": 1700003600,      # BECMG transition end
        "visib": "6+",              # statute miles, "6+"/"P6" = unrestricted
        "clouds": [{"cover": "BKN", "base": 1200}],
        "wdir": 240, "wspd": 12, "wgst": 22,
        "wxString": "-SHRA BR"
    }

Entries that cannot be understood are skipped.
"""

import math
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from flightwx.core.logging_system import get_logger
from flightwx.weather.metar_parser import MAX_VISIBILITY, METERS_PER_STATUTE_MILE
from flightwx.weather.models import (
    VARIABLE,
    ChangeKind,
    CloudLayer,
    ForecastConditions,
    ForecastDocument,
    ForecastPeriod,
    SkyCover,
    Wind,
    lowest_ceiling,
)
from flightwx.weather.phenomena import split_weather_string

logger = get_logger(__name__)

_CHANGE_KINDS = {
    None: ChangeKind.BASE,
    "": ChangeKind.BASE,
    "FM": ChangeKind.FM,
    "BECMG": ChangeKind.BECMG,
    "TEMPO": ChangeKind.TEMPO,
    "PROB": ChangeKind.PROB,
}

# Statute miles: "3", "1.5", "1/2", "1 1/2", "M1/4" (less than), optional SM
_MILES_PATTERN = re.compile(r"^M?(?:(\d+(?:\.\d+)?)|(?:(\d+)\s+)?(\d+)/(\d+))(?:SM)?$")


def parse_taf_visibility(visib: Any) -> float | None:
    """Convert an API visibility value to meters.

    Args:
        visib: Number of statute miles, a string such as "3", "1.5",
            "1/2" or "1 1/2", or "6+"/"P6" for unrestricted. None or ""
            means not given.

    Returns:
        Visibility in meters (rounded), or None when not given/unreadable.
    """
    if isinstance(visib, str):
        text = visib.strip().upper()
        if "6+" in text or "P6" in text:
            return MAX_VISIBILITY
        match = _MILES_PATTERN.match(text)
        if not match:
            return None
        decimal, whole, numerator, denominator = match.groups()
        if decimal is not None:
            miles = float(decimal)
        else:
            if int(denominator) == 0:
                return None
            try:
                miles = int(whole or 0) + int(numerator) / int(denominator)
            except OverflowError:
                return None
        return _miles_to_meters(miles)
    if _is_number(visib):
        return _miles_to_meters(visib)
    return None


def _miles_to_meters(miles: float) -> float | None:
    try:
        meters = miles * METERS_PER_STATUTE_MILE
    except OverflowError:
        return None
    if not math.isfinite(meters):
        return None
    return round(meters)


def parse_clouds(clouds: Any) -> tuple[CloudLayer, ...]:
    """Convert API cloud entries, skipping unknown covers."""
    if not isinstance(clouds, list):
        return ()
    layers = []
    for entry in clouds:
        if not isinstance(entry, Mapping):
            continue
        cover = SkyCover.from_code(entry.get("cover"))
        if cover is None:
            logger.debug("Skipping unknown cloud cover: %r", entry.get("cover"))
            continue
        base = entry.get("base")
        layers.append(CloudLayer(cover=cover, base=int(base) if _is_number(base) else None))
    return tuple(layers)


def ceiling_from_clouds(clouds: Any) -> int | None:
    """Ceiling in feet from API cloud entries, None if there is none."""
    return lowest_ceiling(parse_clouds(clouds))


def parse_wind(entry: Mapping[str, Any]) -> Wind | None:
    """Wind from wdir/wspd/wgst keys, None when no speed is given."""
    speed = entry.get("wspd")
    if not _is_number(speed):
        return None
    wdir = entry.get("wdir")
    if isinstance(wdir, str) and wdir.upper() == VARIABLE:
        direction: int | str | None = VARIABLE
    elif _is_number(wdir):
        direction = int(wdir)
    else:
        direction = None
    gust = entry.get("wgst")
    return Wind(direction=direction, speed=int(speed), gust=int(gust) if _is_number(gust) else None)


def parse_period(entry: Mapping[str, Any]) -> ForecastPeriod | None:
    """Convert one API period entry.

    Returns:
        ForecastPeriod, or None if the change kind or start time is unusable.
    """
    change = entry.get("fcstChange")
    if isinstance(change, str):
        change = change.upper()
    kind = _CHANGE_KINDS.get(change)
    if kind is None:
        logger.debug("Skipping forecast period with change %r", change)
        return None

    start = _epoch_to_datetime(entry.get("timeFrom"))
    if start is None:
        logger.debug("Skipping forecast period without start time")
        return None

    probability = entry.get("probability")
    conditions = ForecastConditions(
        visibility=parse_taf_visibility(entry.get("visib")),
        clouds=parse_clouds(entry.get("clouds")),
        wind=parse_wind(entry),
        weather=split_weather_string(entry.get("wxString")),
    )
    transition_end = None
    if kind == ChangeKind.BECMG:
        transition_end = _epoch_to_datetime(entry.get("timeBec"))

    return ForecastPeriod(
        kind=kind,
        start=start,
        end=_epoch_to_datetime(entry.get("timeTo")),
        probability=int(probability) if _is_number(probability) else None,
        transition_end=transition_end,
        conditions=conditions,
        raw=entry.get("fcstText") or "",
    )


def parse_forecast_document(payload: Any) -> ForecastDocument | None:
    """Convert an API forecast response into a ForecastDocument.

    Args:
        payload: The decoded JSON: a list whose first element is a station
            forecast, or a single station forecast mapping.

    Returns:
        ForecastDocument, or None if the payload holds no forecast.
    """
    if isinstance(payload, list):
        payload = payload[0] if payload else None
    if not isinstance(payload, Mapping):
        return None

    entries = payload.get("fcsts")
    if not isinstance(entries, list):
        return None

    periods = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        period = parse_period(entry)
        if period is not None:
            periods.append(period)

    return ForecastDocument(
        periods=tuple(periods),
        issue_time=_iso_to_datetime(payload.get("issueTime")),
        station=payload.get("icaoId"),
        raw=payload.get("rawTAF"),
    )


def _is_number(value: Any) -> bool:
    """Finite int or float; bools, NaN and infinities do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _epoch_to_datetime(value: Any) -> datetime | None:
    if not _is_number(value):
        return None
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        logger.debug("Timestamp out of range: %r", value)
        return None


def _iso_to_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unreadable issue time: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
