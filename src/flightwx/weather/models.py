"""Weather data models for observation decoding and forecast resolution.

All records are immutable and built fresh by each parse/resolve call.
Optional fields use None for "not reported"; for observations a missing
visibility or ceiling means unrestricted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import total_ordering

# Wind direction tag for variable winds (VRB)
VARIABLE = "VRB"


@total_ordering
class FlightCategory(Enum):
    """Flight category from ceiling and visibility, ordered by severity.

    VFR < MVFR < BIR < IFR < LIFR. BIR (basic instrument rules) sits
    between marginal VFR and IFR.
    """

    VFR = "VFR"
    MVFR = "MVFR"
    BIR = "BIR"
    IFR = "IFR"
    LIFR = "LIFR"

    @property
    def severity(self) -> int:
        """Ordinal severity, 0 for VFR up to 4 for LIFR."""
        return _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self.severity < other.severity


_SEVERITY = {category: index for index, category in enumerate(FlightCategory)}

# Stand-in for an unrestricted ceiling (ft) or visibility (m)
UNRESTRICTED = 99999


def classify(ceiling: float | None, visibility: float | None) -> FlightCategory:
    """Classify conditions into a flight category.

    Tiers are tested in order and the first match wins. The LIFR test uses
    OR while the tiers above it use AND, so some combinations fall through
    to the IFR residual bucket (e.g. 550 ft with 2000 m).

    Args:
        ceiling: Ceiling in feet, None if there is none.
        visibility: Visibility in meters, None if unrestricted.

    Returns:
        Flight category.
    """
    c = ceiling if ceiling is not None else UNRESTRICTED
    v = visibility if visibility is not None else UNRESTRICTED

    if c > 3000 and v > 8000:
        return FlightCategory.VFR
    if c >= 1000 and v >= 5000:
        return FlightCategory.MVFR
    if c >= 600 and v >= 1500:
        return FlightCategory.BIR
    if c < 500 or v < 1500:
        return FlightCategory.LIFR
    return FlightCategory.IFR


class SkyCover(Enum):
    """Cloud cover tiers."""

    FEW = "FEW"  # 1/8 to 2/8
    SCATTERED = "SCT"  # 3/8 to 4/8
    BROKEN = "BKN"  # 5/8 to 7/8 (ceiling)
    OVERCAST = "OVC"  # 8/8 (ceiling)
    VERTICAL_VISIBILITY = "VV"  # Sky obscured (ceiling)
    NO_SIGNIFICANT = "NSC"
    SKY_CLEAR = "SKC"
    CLEAR = "CLR"
    NO_CLOUD_DETECTED = "NCD"
    CAVOK = "CAVOK"

    @property
    def forms_ceiling(self) -> bool:
        """True for the tiers that can set a ceiling."""
        return self in (SkyCover.BROKEN, SkyCover.OVERCAST, SkyCover.VERTICAL_VISIBILITY)

    @classmethod
    def from_code(cls, code: str | None) -> "SkyCover | None":
        """Look up a cover tier by its report code, None if unknown."""
        if not code:
            return None
        try:
            return cls(code.upper())
        except ValueError:
            return None


class ChangeKind(Enum):
    """Forecast period change indicator."""

    BASE = "BASE"  # Initial, unconditioned period
    FM = "FM"  # From: replaces conditions at start
    BECMG = "BECMG"  # Becoming: gradual transition
    TEMPO = "TEMPO"  # Temporary fluctuation
    PROB = "PROB"  # Probability group


@dataclass(frozen=True)
class Wind:
    """Wind information.

    Attributes:
        direction: Degrees 0-359, VARIABLE for VRB, or None if not given.
        speed: Sustained speed in knots, or None.
        gust: Gust speed in knots, or None.
    """

    direction: int | str | None = None
    speed: int | None = None
    gust: int | None = None

    @property
    def is_variable(self) -> bool:
        """Check if wind direction is variable."""
        return self.direction == VARIABLE

    @property
    def is_calm(self) -> bool:
        """Check if wind is calm (0 knots)."""
        return self.speed == 0

    @property
    def peak(self) -> int | None:
        """Highest reported speed (gust if present)."""
        if self.gust is not None:
            return self.gust
        return self.speed


@dataclass(frozen=True)
class CloudLayer:
    """Single cloud layer.

    Attributes:
        cover: Cover tier.
        base: Layer base in feet AGL, or None when the group has no height.
    """

    cover: SkyCover
    base: int | None = None

    @property
    def is_ceiling(self) -> bool:
        """Check if this layer constitutes a ceiling."""
        return self.cover.forms_ceiling and self.base is not None


def lowest_ceiling(clouds: tuple[CloudLayer, ...] | None) -> int | None:
    """Lowest base among BKN/OVC/VV layers, None if there is no ceiling."""
    if not clouds:
        return None
    bases = [layer.base for layer in clouds if layer.is_ceiling]
    return min(bases) if bases else None


@dataclass(frozen=True)
class Observation:
    """Decoded surface observation (METAR).

    Attributes:
        raw: Original report text.
        station: Station code, if the report starts with one.
        observation_time: Observation time (UTC), or None.
        wind: Wind group, or None.
        visibility: Visibility in meters, None when unrestricted/unreported.
        clouds: Cloud layers in report order.
        temperature: Temperature in Celsius.
        dewpoint: Dewpoint in Celsius.
        altimeter: Pressure setting in hPa.
        weather: Weather phenomenon groups, verbatim and in order.
        is_cavok: True if the report carried CAVOK.
    """

    raw: str
    station: str | None = None
    observation_time: datetime | None = None
    wind: Wind | None = None
    visibility: float | None = None
    clouds: tuple[CloudLayer, ...] = ()
    temperature: int | None = None
    dewpoint: int | None = None
    altimeter: int | None = None
    weather: tuple[str, ...] = ()
    is_cavok: bool = False

    @property
    def ceiling(self) -> int | None:
        """Lowest BKN/OVC/VV base in feet, or None."""
        return lowest_ceiling(self.clouds)

    @property
    def category(self) -> FlightCategory:
        """Flight category from ceiling and visibility."""
        return classify(self.ceiling, self.visibility)


@dataclass(frozen=True)
class ForecastConditions:
    """Conditions given by one forecast period; every field is optional.

    A period that omits a field inherits it from another period through
    merged_over(). An empty cloud list counts as omitted.
    """

    visibility: float | None = None
    clouds: tuple[CloudLayer, ...] = ()
    wind: Wind | None = None
    weather: tuple[str, ...] = ()

    @property
    def ceiling(self) -> int | None:
        """Lowest BKN/OVC/VV base in feet, or None."""
        return lowest_ceiling(self.clouds)

    @property
    def category(self) -> FlightCategory:
        """Flight category from these conditions."""
        return classify(self.ceiling, self.visibility)

    @property
    def has_wind(self) -> bool:
        """Check if a wind group with a speed is present."""
        return self.wind is not None and self.wind.speed is not None

    def merged_over(self, fallback: "ForecastConditions | None") -> "ForecastConditions":
        """Fill every omitted field from fallback.

        Args:
            fallback: Conditions to inherit from, or None.

        Returns:
            New conditions; self when there is nothing to inherit.
        """
        if fallback is None:
            return self
        return ForecastConditions(
            visibility=self.visibility if self.visibility is not None else fallback.visibility,
            clouds=self.clouds if self.clouds else fallback.clouds,
            wind=self.wind if self.has_wind else fallback.wind,
            weather=self.weather if self.weather else fallback.weather,
        )


@dataclass(frozen=True)
class ForecastPeriod:
    """One forecast line (base, FM, BECMG, TEMPO or PROB group).

    Attributes:
        kind: Change indicator.
        start: Start of validity (UTC).
        end: End of validity, None if open-ended.
        probability: 30 or 40 for probability groups, else None.
        transition_end: Time a BECMG transition completes, if given.
        conditions: Forecast elements given by this line.
        raw: Original text of the line, if known.
    """

    kind: ChangeKind
    start: datetime
    end: datetime | None = None
    probability: int | None = None
    transition_end: datetime | None = None
    conditions: ForecastConditions = field(default_factory=ForecastConditions)
    raw: str = ""

    @property
    def is_overlay(self) -> bool:
        """TEMPO and PROB groups overlay the base forecast."""
        return self.kind in (ChangeKind.TEMPO, ChangeKind.PROB)

    @property
    def is_probable_tempo(self) -> bool:
        """TEMPO combined with a PROB30/PROB40 qualifier."""
        return (
            self.kind == ChangeKind.TEMPO
            and self.probability is not None
            and self.probability >= 30
        )

    @property
    def becoming_end(self) -> datetime:
        """When a BECMG transition is complete."""
        if self.transition_end is not None:
            return self.transition_end
        if self.end is not None:
            return self.end
        return self.start

    def valid_at(self, when: datetime) -> bool:
        """Check whether when falls in [start, end)."""
        if when < self.start:
            return False
        return self.end is None or when < self.end


@dataclass(frozen=True)
class ForecastDocument:
    """Forecast (TAF) made of periods in document order.

    Attributes:
        periods: Forecast periods as they appear in the document.
        issue_time: Issue time (UTC), if known.
        station: Station code, if known.
        raw: Raw forecast text, if known.
    """

    periods: tuple[ForecastPeriod, ...] = ()
    issue_time: datetime | None = None
    station: str | None = None
    raw: str | None = None

    @property
    def initial_base(self) -> ForecastPeriod | None:
        """First unconditioned period, or None."""
        for period in self.periods:
            if period.kind == ChangeKind.BASE:
                return period
        return None

    @property
    def overlays(self) -> tuple[ForecastPeriod, ...]:
        """TEMPO and PROB periods in document order."""
        return tuple(p for p in self.periods if p.is_overlay)


@dataclass(frozen=True)
class HourlyForecast:
    """Resolved forecast for one hour.

    Attributes:
        hour_index: Offset from the resolution start (0 = now).
        time: Instant this hour was evaluated at (UTC).
        category: Resolved category, None if no period covers the hour.
        ceiling: Resolved ceiling in feet.
        visibility: Resolved visibility in meters.
        wind: Resolved wind, speed and gust maximised over overlays.
        weather: Merged weather groups for display.
        possible_category: Worst concurrent overlay category, even if ignored.
        possible_ceiling: Ceiling of that overlay.
        possible_visibility: Visibility of that overlay.
        wind_shear: Shear description, or None.
        icing: True when icing conditions are likely.
    """

    hour_index: int
    time: datetime
    category: FlightCategory | None = None
    ceiling: int | None = None
    visibility: float | None = None
    wind: Wind | None = None
    weather: str = ""
    possible_category: FlightCategory | None = None
    possible_ceiling: int | None = None
    possible_visibility: float | None = None
    wind_shear: str | None = None
    icing: bool = False

    @property
    def utc_hour(self) -> int:
        """Hour of day (UTC) for this entry."""
        return self.time.hour

    @property
    def is_covered(self) -> bool:
        """Check whether a forecast period covers this hour."""
        return self.category is not None
