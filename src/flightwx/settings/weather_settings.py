"""Weather decoding and forecast resolution settings.

Settings are stored in ~/.flightwx/settings.json under the "weather" key.
Only tunables live here; the flight category boundaries are fixed and are
not configurable.

Typical usage:
    from flightwx.settings import get_weather_settings

    settings = get_weather_settings()
    settings.set_forecast_hours(6)
    settings.save()
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Forecast timeline length
DEFAULT_FORECAST_HOURS = 12

# Caller-side staleness for cached reports (seconds)
DEFAULT_METAR_TTL = 600.0
DEFAULT_TAF_TTL = 600.0

# Strong wind display thresholds (knots)
DEFAULT_STRONG_WIND_SPEED = 15
DEFAULT_STRONG_WIND_GUST = 20

# Wind shear triggers
DEFAULT_SHEAR_SPEED_DELTA = 10
DEFAULT_SHEAR_DIRECTION_DELTA = 60
DEFAULT_SHEAR_MIN_SPEED = 8
DEFAULT_SHEAR_GUST_SPREAD = 15

_FIELDS = (
    "forecast_hours",
    "metar_ttl",
    "taf_ttl",
    "strong_wind_speed",
    "strong_wind_gust",
    "shear_speed_delta",
    "shear_direction_delta",
    "shear_min_speed",
    "shear_gust_spread",
)


@dataclass
class WeatherSettings:
    """Weather settings with persistence.

    Attributes:
        forecast_hours: Number of hourly entries produced by the resolver.
        metar_ttl: Seconds a cached observation stays fresh.
        taf_ttl: Seconds a cached forecast document stays fresh.
        strong_wind_speed: Sustained wind above this is strong (kt).
        strong_wind_gust: Gust above this is strong (kt).
        shear_speed_delta: Speed change that signals shear (kt).
        shear_direction_delta: Direction change that signals shear (deg).
        shear_min_speed: Both speeds must reach this for the direction test (kt).
        shear_gust_spread: Gust over sustained that signals shear (kt).
    """

    forecast_hours: int = DEFAULT_FORECAST_HOURS
    metar_ttl: float = DEFAULT_METAR_TTL
    taf_ttl: float = DEFAULT_TAF_TTL
    strong_wind_speed: int = DEFAULT_STRONG_WIND_SPEED
    strong_wind_gust: int = DEFAULT_STRONG_WIND_GUST
    shear_speed_delta: int = DEFAULT_SHEAR_SPEED_DELTA
    shear_direction_delta: int = DEFAULT_SHEAR_DIRECTION_DELTA
    shear_min_speed: int = DEFAULT_SHEAR_MIN_SPEED
    shear_gust_spread: int = DEFAULT_SHEAR_GUST_SPREAD
    _settings_path: Path = field(
        default_factory=lambda: Path.home() / ".flightwx" / "settings.json"
    )
    _dirty: bool = field(default=False, repr=False)

    def set_forecast_hours(self, hours: int) -> None:
        """Set the resolved timeline length.

        Args:
            hours: Number of hours, at least 1.

        Raises:
            ValueError: If hours is not positive.
        """
        if hours <= 0:
            raise ValueError(f"forecast_hours must be positive, got {hours}")
        self.forecast_hours = hours
        self._dirty = True

    def set_cache_ttl(self, metar_ttl: float, taf_ttl: float) -> None:
        """Set caller-side cache lifetimes in seconds."""
        if metar_ttl < 0 or taf_ttl < 0:
            raise ValueError("cache TTL cannot be negative")
        self.metar_ttl = metar_ttl
        self.taf_ttl = taf_ttl
        self._dirty = True

    def set_strong_wind(self, speed: int, gust: int) -> None:
        """Set strong wind thresholds.

        Args:
            speed: Sustained wind threshold in knots.
            gust: Gust threshold in knots.
        """
        self.strong_wind_speed = speed
        self.strong_wind_gust = gust
        self._dirty = True

    def load(self, path: Path | str | None = None) -> bool:
        """Load settings from file.

        Args:
            path: Optional path to settings file.
                 Defaults to ~/.flightwx/settings.json.

        Returns:
            True if loaded successfully, False otherwise.
        """
        if path is not None:
            self._settings_path = Path(path)

        if not self._settings_path.exists():
            logger.info("No settings file found, using weather defaults")
            return False

        try:
            with open(self._settings_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load weather settings: %s", e)
            return False

        weather_data = data.get("weather") if isinstance(data, dict) else None
        if not isinstance(weather_data, dict):
            weather_data = {}

        defaults = WeatherSettings()
        for name in _FIELDS:
            default = getattr(defaults, name)
            value = _coerce(weather_data.get(name, default), default)
            if name == "forecast_hours" and value == 0:
                value = None
            if value is None:
                logger.warning("Ignoring invalid weather setting %s=%r", name, weather_data[name])
                value = default
            setattr(self, name, value)

        self._dirty = False
        logger.info("Loaded weather settings from %s", self._settings_path)
        return True

    def save(self, path: Path | str | None = None) -> bool:
        """Save settings to file.

        Other top-level sections of the file are preserved.

        Args:
            path: Optional path to settings file.

        Returns:
            True if saved successfully, False otherwise.
        """
        if path is not None:
            self._settings_path = Path(path)

        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)

            existing_data: dict[str, Any] = {}
            if self._settings_path.exists():
                with open(self._settings_path, encoding="utf-8") as f:
                    existing_data = json.load(f)

            existing_data["weather"] = self.to_dict()

            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(existing_data, f, indent=2)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to save weather settings: %s", e)
            return False

        self._dirty = False
        logger.info("Saved weather settings to %s", self._settings_path)
        return True

    @property
    def is_dirty(self) -> bool:
        """Check if settings have unsaved changes."""
        return self._dirty

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {name: getattr(self, name) for name in _FIELDS}


def _coerce(value: Any, default: int | float) -> int | float | None:
    """Match a loaded value to the type of its default.

    Returns:
        The value (ints widened to float where the default is a float), or
        None if it has the wrong type or is negative.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(default, int) and not isinstance(value, int):
        return None
    if not 0 <= value < float("inf"):
        return None
    return float(value) if isinstance(default, float) else value


# Global singleton instance
_global_settings: WeatherSettings | None = None


def get_weather_settings() -> WeatherSettings:
    """Get the global weather settings singleton.

    Loads settings from disk on first access.

    Returns:
        WeatherSettings instance.
    """
    global _global_settings
    if _global_settings is None:
        _global_settings = WeatherSettings()
        _global_settings.load()
    return _global_settings


def reset_weather_settings() -> None:
    """Reset the global weather settings singleton.

    Forces reload on next access.
    """
    global _global_settings
    _global_settings = None
