"""METAR string parser for aviation weather data.

Parses raw METAR strings into Observation records. Each field has its own
pattern and scans the whole token list, so group order does not matter.
Groups that are not recognised are skipped.
"""

import calendar
import re
from datetime import UTC, datetime, timedelta

from flightwx.core.logging_system import get_logger
from flightwx.weather.models import VARIABLE, CloudLayer, Observation, SkyCover, Wind
from flightwx.weather.phenomena import is_weather_group

logger = get_logger(__name__)

METERS_PER_STATUTE_MILE = 1609.34
HPA_PER_INHG = 33.8639

# "10 km or more"
MAX_VISIBILITY = 10000


class METARParser:
    """Parse METAR strings into Observation objects.

    Handles ICAO (meters, Q) and US (statute miles, A) report styles.
    """

    STATION_PATTERN = re.compile(r"^[A-Z][A-Z0-9]{3}$")
    TIME_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{2})Z$")
    WIND_PATTERN = re.compile(r"^(\d{3}|VRB)(\d{2,3})(?:G(\d{2,3}))?KT$")
    VISIBILITY_M_PATTERN = re.compile(r"^(\d{4})$")
    VISIBILITY_SM_PATTERN = re.compile(r"^(\d+)(?:/(\d+))?SM$")
    CLOUD_PATTERN = re.compile(r"^(FEW|SCT|BKN|OVC|VV)(\d{3})")
    TEMP_PATTERN = re.compile(r"^(M?\d{2})/(M?\d{2})$")
    QNH_PATTERN = re.compile(r"^Q(\d{4})$")  # ICAO/Europe: Q1013 = 1013 hPa
    ALTIMETER_PATTERN = re.compile(r"^A(\d{4})$")  # US: A2992 = 29.92 inHg

    def parse(self, raw_metar: str, now: datetime | None = None) -> Observation | None:
        """Parse a raw METAR string into an Observation.

        Args:
            raw_metar: Raw METAR (e.g., "EFHK 121920Z 27015G25KT 9999 BKN035 07/02 Q1008").
            now: Reference time for the day/hour/minute group. Defaults to now (UTC).

        Returns:
            Observation with whatever fields could be recognised, or None for
            empty or non-text input.
        """
        if not isinstance(raw_metar, str) or not raw_metar.strip():
            logger.debug("No METAR text to parse: %r", raw_metar)
            return None

        raw = raw_metar.strip()
        tokens = raw.split()
        now = now or datetime.now(UTC)

        visibility = self._parse_visibility(tokens)
        is_cavok = "CAVOK" in tokens
        if is_cavok:
            visibility = MAX_VISIBILITY

        temperature, dewpoint = self._parse_temperature(tokens)

        observation = Observation(
            raw=raw,
            station=self._parse_station(tokens),
            observation_time=self._parse_time(tokens, now),
            wind=self._parse_wind(tokens),
            visibility=visibility,
            clouds=self._parse_clouds(tokens),
            temperature=temperature,
            dewpoint=dewpoint,
            altimeter=self._parse_pressure(tokens),
            weather=tuple(t for t in tokens if is_weather_group(t)),
            is_cavok=is_cavok,
        )
        logger.debug("Parsed METAR %s: %s", observation.station, observation.category.value)
        return observation

    def _parse_station(self, tokens: list[str]) -> str | None:
        """Station code: first token, skipping a METAR/SPECI prefix."""
        for token in tokens[:2]:
            if token in ("METAR", "SPECI"):
                continue
            if self.STATION_PATTERN.match(token):
                return token
            return None
        return None

    def _parse_time(self, tokens: list[str], now: datetime) -> datetime | None:
        """Parse the ddHHmmZ group against the month of now.

        A time more than 24 hours ahead of now belongs to the previous month.
        """
        for token in tokens:
            match = self.TIME_PATTERN.match(token)
            if not match:
                continue
            day, hour, minute = (int(g) for g in match.groups())
            if hour > 23 or minute > 59:
                return None

            observed = _build_utc(now.year, now.month, day, hour, minute)
            if observed is None or observed - now > timedelta(hours=24):
                year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
                observed = _build_utc(year, month, day, hour, minute)
            return observed
        return None

    def _parse_wind(self, tokens: list[str]) -> Wind | None:
        """Parse wind information."""
        for token in tokens:
            match = self.WIND_PATTERN.match(token)
            if match:
                direction: int | str = VARIABLE if match.group(1) == "VRB" else int(match.group(1))
                gust = int(match.group(3)) if match.group(3) else None
                return Wind(direction=direction, speed=int(match.group(2)), gust=gust)
        return None

    def _parse_visibility(self, tokens: list[str]) -> float | None:
        """Parse visibility in meters.

        A bare four-digit group only counts after the station and time
        groups. Statute miles (with simple fractions) are converted.
        """
        for i, token in enumerate(tokens):
            match = self.VISIBILITY_M_PATTERN.match(token)
            if match and i > 1:
                meters = int(match.group(1))
                return MAX_VISIBILITY if meters == 9999 else meters

            match = self.VISIBILITY_SM_PATTERN.match(token)
            if match:
                whole = int(match.group(1))
                if match.group(2):
                    denominator = int(match.group(2))
                    if denominator == 0:
                        continue
                    miles = whole / denominator
                else:
                    miles = float(whole)
                return miles * METERS_PER_STATUTE_MILE
        return None

    def _parse_clouds(self, tokens: list[str]) -> tuple[CloudLayer, ...]:
        """Parse cloud layers in report order."""
        layers = []
        for token in tokens:
            match = self.CLOUD_PATTERN.match(token)
            if match:
                cover = SkyCover(match.group(1))
                layers.append(CloudLayer(cover=cover, base=int(match.group(2)) * 100))
        return tuple(layers)

    def _parse_temperature(self, tokens: list[str]) -> tuple[int | None, int | None]:
        """Parse temperature and dewpoint; M prefix means minus."""
        for token in tokens:
            match = self.TEMP_PATTERN.match(token)
            if match:
                return _signed(match.group(1)), _signed(match.group(2))
        return None, None

    def _parse_pressure(self, tokens: list[str]) -> int | None:
        """Parse QNH in hPa, converting an inHg altimeter group."""
        for token in tokens:
            match = self.QNH_PATTERN.match(token)
            if match:
                return int(match.group(1))
            match = self.ALTIMETER_PATTERN.match(token)
            if match:
                # A3002 = 30.02 inHg
                return round(int(match.group(1)) / 100 * HPA_PER_INHG)
        return None


def _signed(value: str) -> int:
    if value.startswith("M"):
        return -int(value[1:])
    return int(value)


def _build_utc(year: int, month: int, day: int, hour: int, minute: int) -> datetime | None:
    """Build a UTC datetime, None if the day does not exist in that month."""
    if day < 1 or day > calendar.monthrange(year, month)[1]:
        return None
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


_default_parser = METARParser()


def parse_metar(raw_metar: str, now: datetime | None = None) -> Observation | None:
    """Parse a raw METAR with a shared parser instance."""
    return _default_parser.parse(raw_metar, now=now)
