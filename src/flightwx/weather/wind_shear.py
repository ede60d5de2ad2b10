"""Wind shear heuristic between a base forecast wind and an overlay wind."""

from flightwx.settings.weather_settings import (
    DEFAULT_SHEAR_DIRECTION_DELTA,
    DEFAULT_SHEAR_GUST_SPREAD,
    DEFAULT_SHEAR_MIN_SPEED,
    DEFAULT_SHEAR_SPEED_DELTA,
)
from flightwx.weather.formatting import format_wind
from flightwx.weather.models import Wind


def direction_difference(a: int, b: int) -> int:
    """Smallest angle between two directions in degrees (0-180)."""
    diff = abs(a - b) % 360
    return 360 - diff if diff > 180 else diff


def detect_wind_shear(
    base: Wind | None,
    overlay: Wind | None,
    speed_delta: int = DEFAULT_SHEAR_SPEED_DELTA,
    direction_delta: int = DEFAULT_SHEAR_DIRECTION_DELTA,
    min_speed: int = DEFAULT_SHEAR_MIN_SPEED,
    gust_spread: int = DEFAULT_SHEAR_GUST_SPREAD,
) -> str | None:
    """Compare two winds and describe a significant change.

    Any one trigger suffices: speed change of speed_delta or more; direction
    change of direction_delta or more with both directions numeric and both
    speeds at least min_speed; overlay gusts gust_spread or more above its
    sustained speed.

    Args:
        base: Wind of the resolved base forecast.
        overlay: Wind of the overlay period.

    Returns:
        "base → overlay" description, or None.
    """
    base_speed = base.speed if base is not None else None
    overlay_speed = overlay.speed if overlay is not None else None
    if base_speed is None and overlay_speed is None:
        return None

    triggered = False

    if base_speed is not None and overlay_speed is not None:
        if abs(overlay_speed - base_speed) >= speed_delta:
            triggered = True

        if (
            isinstance(base.direction, int)
            and isinstance(overlay.direction, int)
            and base_speed >= min_speed
            and overlay_speed >= min_speed
            and direction_difference(base.direction, overlay.direction) >= direction_delta
        ):
            triggered = True

    if overlay is not None and overlay_speed is not None and overlay.gust is not None:
        if overlay.gust - overlay_speed >= gust_spread:
            triggered = True

    if not triggered:
        return None
    return f"{format_wind(base)} → {format_wind(overlay)}"
