"""User settings management for flightwx.

Persistent tunables for the forecast resolver and the caller-side cache.
"""

from flightwx.settings.weather_settings import (
    WeatherSettings,
    get_weather_settings,
    reset_weather_settings,
)

__all__ = [
    "WeatherSettings",
    "get_weather_settings",
    "reset_weather_settings",
]
