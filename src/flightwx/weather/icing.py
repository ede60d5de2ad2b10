"""Icing risk heuristic.

Freezing precipitation always flags. Otherwise the temperature must be in
the icing band and either precipitation or a near-saturated low cloud base
must be present.
"""

from collections.abc import Iterable

from flightwx.weather.models import Observation

FREEZING_MARKER = "FZ"

ICING_TEMP_MIN = -20
ICING_TEMP_MAX = 2

# Rain, snow, drizzle, ice pellets, snow grains, hail, small hail
ICING_PRECIPITATION = ("RA", "SN", "DZ", "PL", "SG", "GR", "GS")

LOW_CLOUD_CEILING = 5000
SATURATION_SPREAD = 3


def is_icing(
    weather: Iterable[str],
    temperature: float | None,
    dewpoint: float | None,
    ceiling: int | None,
) -> bool:
    """Check whether icing conditions are likely.

    Args:
        weather: Weather groups (e.g. ["-RA", "BR"]).
        temperature: Temperature in Celsius, or None.
        dewpoint: Dewpoint in Celsius, or None.
        ceiling: Ceiling in feet, or None.

    Returns:
        True if icing is likely.
    """
    codes = list(weather)
    if any(FREEZING_MARKER in code for code in codes):
        return True

    if temperature is None:
        return False
    if temperature < ICING_TEMP_MIN or temperature > ICING_TEMP_MAX:
        return False

    for code in codes:
        if any(precip in code for precip in ICING_PRECIPITATION):
            return True

    if ceiling is not None and ceiling <= LOW_CLOUD_CEILING and dewpoint is not None:
        return abs(temperature - dewpoint) <= SATURATION_SPREAD

    return False


def observation_icing_risk(observation: Observation | None) -> bool:
    """Icing risk for a decoded observation."""
    if observation is None:
        return False
    return is_icing(
        observation.weather,
        observation.temperature,
        observation.dewpoint,
        observation.ceiling,
    )
