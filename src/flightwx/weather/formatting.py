"""Compact display strings for timeline cells and summaries."""

from flightwx.settings.weather_settings import DEFAULT_STRONG_WIND_GUST, DEFAULT_STRONG_WIND_SPEED
from flightwx.weather.models import Wind


def format_ceiling(ceiling: int | None) -> str:
    """Format a ceiling: "-", "800", "3k", "3.5k"."""
    if ceiling is None:
        return "-"
    if ceiling < 1000:
        return str(ceiling)
    if ceiling % 1000 == 0:
        return f"{ceiling // 1000}k"
    return f"{ceiling / 1000:.1f}k"


def format_visibility_km(visibility: float | None) -> str:
    """Format visibility in kilometres: "-", "10+", "5", "0.8"."""
    if visibility is None:
        return "-"
    if visibility >= 10000:
        return "10+"
    if visibility >= 1000:
        return f"{visibility / 1000:.0f}"
    return f"{visibility / 1000:.1f}"


def format_wind(wind: Wind | None) -> str:
    """Format wind as a report group (27015G25KT, VRB02KT).

    Missing direction is omitted; missing wind gives "-".
    """
    if wind is None or wind.speed is None:
        return "-"
    if wind.is_variable:
        direction = "VRB"
    elif wind.direction is None:
        direction = ""
    else:
        direction = f"{wind.direction:03d}"
    gust = f"G{wind.gust:02d}" if wind.gust is not None else ""
    return f"{direction}{wind.speed:02d}{gust}KT"


def is_strong_wind(
    speed: int | None,
    gust: int | None,
    speed_limit: int = DEFAULT_STRONG_WIND_SPEED,
    gust_limit: int = DEFAULT_STRONG_WIND_GUST,
) -> bool:
    """Strong wind: sustained above speed_limit or gusts above gust_limit."""
    return (speed is not None and speed > speed_limit) or (gust is not None and gust > gust_limit)
