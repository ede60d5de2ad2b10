"""Hour-by-hour resolution of a forecast document into flight categories.

Each hour is resolved independently:

1. Pick the active base period (BASE, FM, or BECMG). A BECMG that is still
   in transition applies at once if it makes conditions worse, and only
   when the transition completes if it makes them better.
2. Fill elements the active period omits from the initial base period.
3. Apply TEMPO/PROB overlays that are valid at that hour. Only
   deteriorations are applied. A TEMPO with PROB30/40 is never applied,
   and neither is one made up only of showers or thunderstorms.
4. Keep the worst overlay separately for display, whether applied or not.
5. Annotate wind shear and icing.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from flightwx.core.logging_system import get_logger
from flightwx.settings.weather_settings import WeatherSettings
from flightwx.weather.flight_category import is_worse, worst_category
from flightwx.weather.formatting import is_strong_wind
from flightwx.weather.icing import is_icing
from flightwx.weather.models import (
    ChangeKind,
    FlightCategory,
    ForecastConditions,
    ForecastDocument,
    ForecastPeriod,
    HourlyForecast,
    Observation,
    Wind,
)
from flightwx.weather.phenomena import is_transient_only, merge_weather
from flightwx.weather.wind_shear import detect_wind_shear

logger = get_logger(__name__)


@dataclass(frozen=True)
class ActiveBase:
    """Base period in force at an instant.

    Attributes:
        period: Active BASE/FM/BECMG period.
        initial_base: Unconditioned period used for inheritance, if any.
        conditions: Active conditions with omitted elements inherited.
    """

    period: ForecastPeriod
    initial_base: ForecastPeriod | None
    conditions: ForecastConditions


@dataclass(frozen=True)
class WindowSummary:
    """Worst conditions around an instant (e.g. a waypoint arrival time)."""

    category: FlightCategory | None
    strong_wind: bool


class ForecastResolver:
    """Resolve forecast documents into hourly timelines.

    Stateless apart from its settings; every call recomputes from the
    document it is given.
    """

    def __init__(self, settings: WeatherSettings | None = None):
        """Initialize resolver.

        Args:
            settings: Tunables (timeline length, shear and wind thresholds).
                Defaults are used when not given.
        """
        self.settings = settings or WeatherSettings()

    def resolve(
        self,
        document: ForecastDocument | None,
        observation: Observation | None = None,
        now: datetime | None = None,
        hours: int | None = None,
    ) -> list[HourlyForecast] | None:
        """Resolve a forecast into one entry per hour, starting now.

        Args:
            document: Forecast document.
            observation: Latest observation for the station. Its temperature
                and dewpoint stand in for forecast temperatures in the icing
                check.
            now: Start of the timeline. Defaults to now (UTC).
            hours: Timeline length. Defaults to settings.forecast_hours.

        Returns:
            List of HourlyForecast in hour order, or None if the document has
            no periods.

        Raises:
            ValueError: If hours is not positive.
        """
        if document is None or not document.periods:
            return None

        count = hours if hours is not None else self.settings.forecast_hours
        if count <= 0:
            raise ValueError(f"hours must be positive, got {count}")

        now = now or datetime.now(UTC)
        timeline = [
            self.resolve_hour(document, index, now + timedelta(hours=index), observation)
            for index in range(count)
        ]
        covered = sum(1 for entry in timeline if entry.is_covered)
        logger.debug(
            "Resolved %d/%d hours for %s", covered, count, document.station or "unknown station"
        )
        return timeline

    def resolve_hour(
        self,
        document: ForecastDocument,
        index: int,
        when: datetime,
        observation: Observation | None = None,
    ) -> HourlyForecast:
        """Resolve a single hour.

        Args:
            document: Forecast document.
            index: Hour index to record on the result.
            when: Instant to evaluate.
            observation: Latest observation, for the icing check.

        Returns:
            HourlyForecast; category is None when no base period covers when.
        """
        active = self.select_base(document, when)
        if active is None:
            logger.debug("No forecast period covers %s", when.isoformat())
            return HourlyForecast(hour_index=index, time=when)

        base = active.conditions
        overlays = [p for p in document.periods if p.is_overlay and p.valid_at(when)]

        category, ceiling, visibility = self._apply_overlays(base, overlays)
        possible_category, possible_ceiling, possible_visibility = self._worst_overlay(
            base, overlays
        )
        weather = merge_weather(base.weather, *(p.conditions.weather for p in overlays))

        # First overlay in document order that carries a wind group
        shear_overlay = next((p for p in overlays if p.conditions.has_wind), None)
        wind_shear = detect_wind_shear(
            base.wind,
            shear_overlay.conditions.wind if shear_overlay is not None else None,
            speed_delta=self.settings.shear_speed_delta,
            direction_delta=self.settings.shear_direction_delta,
            min_speed=self.settings.shear_min_speed,
            gust_spread=self.settings.shear_gust_spread,
        )

        temperature = observation.temperature if observation is not None else None
        dewpoint = observation.dewpoint if observation is not None else None

        return HourlyForecast(
            hour_index=index,
            time=when,
            category=category,
            ceiling=ceiling,
            visibility=visibility,
            wind=_max_wind(base.wind, overlays),
            weather=" ".join(weather),
            possible_category=possible_category,
            possible_ceiling=possible_ceiling,
            possible_visibility=possible_visibility,
            wind_shear=wind_shear,
            icing=is_icing(weather, temperature, dewpoint, ceiling),
        )

    def select_base(self, document: ForecastDocument, when: datetime) -> ActiveBase | None:
        """Find the base period in force at when.

        Periods are scanned in start order (document order for equal
        starts); overlays are ignored.

        Returns:
            ActiveBase, or None if no base period has started.
        """
        active: ForecastPeriod | None = None
        initial_base: ForecastPeriod | None = None

        for period in sorted(document.periods, key=lambda p: p.start):
            if period.is_overlay or period.start > when:
                continue

            if period.kind == ChangeKind.BASE:
                initial_base = period
                active = period
            elif period.kind == ChangeKind.BECMG and period.becoming_end > when:
                reference = active or initial_base
                if reference is not None and self._deteriorates(period, reference, initial_base):
                    active = period
            else:
                active = period

        if active is None:
            return None
        return ActiveBase(
            period=active,
            initial_base=initial_base,
            conditions=_inherit(active, initial_base),
        )

    def conditions_at(
        self,
        document: ForecastDocument | None,
        when: datetime,
        observation: Observation | None = None,
    ) -> HourlyForecast | None:
        """Resolve the forecast at an arbitrary instant.

        Returns:
            HourlyForecast with hour_index 0, or None if the document has no
            periods.
        """
        if document is None or not document.periods:
            return None
        return self.resolve_hour(document, 0, when, observation)

    def category_at(
        self, document: ForecastDocument | None, when: datetime
    ) -> FlightCategory | None:
        """Resolved category at an instant, None when not covered."""
        entry = self.conditions_at(document, when)
        return entry.category if entry is not None else None

    def category_around(
        self,
        document: ForecastDocument | None,
        when: datetime,
        spread: timedelta = timedelta(hours=1),
    ) -> WindowSummary:
        """Worst category and strong-wind flag at when and when ± spread.

        Used for arrival estimates, where the exact arrival hour is uncertain.
        """
        offsets = (-spread, timedelta(0), spread)
        samples = [self.conditions_at(document, when + offset) for offset in offsets]
        entries = [s for s in samples if s is not None and s.is_covered]

        category = worst_category(*(entry.category for entry in entries))
        strong_wind = any(
            entry.wind is not None
            and is_strong_wind(
                entry.wind.speed,
                entry.wind.gust,
                self.settings.strong_wind_speed,
                self.settings.strong_wind_gust,
            )
            for entry in entries
        )
        return WindowSummary(category=category, strong_wind=strong_wind)

    def _deteriorates(
        self,
        becoming: ForecastPeriod,
        reference: ForecastPeriod,
        initial_base: ForecastPeriod | None,
    ) -> bool:
        """Check whether a BECMG period worsens the reference conditions.

        The target is merged the same way as when the period is active, so
        the verdict matches what the hour resolves to once it applies.
        """
        current = _inherit(reference, initial_base)
        target = _inherit(becoming, initial_base)
        return is_worse(target.category, current.category)

    def _apply_overlays(
        self,
        base: ForecastConditions,
        overlays: list[ForecastPeriod],
    ) -> tuple[FlightCategory, int | None, float | None]:
        """Apply deteriorating overlays to the base conditions.

        Returns:
            (category, ceiling, visibility) after overlays.
        """
        current = base
        category = base.category

        for overlay in overlays:
            if overlay.is_probable_tempo:
                continue
            candidate = overlay.conditions.merged_over(current)
            candidate_category = candidate.category
            if not is_worse(candidate_category, category):
                continue
            if is_transient_only(overlay.conditions.weather):
                logger.debug(
                    "Disregarding transient overlay %s", " ".join(overlay.conditions.weather)
                )
                continue
            current = candidate
            category = candidate_category

        return category, current.ceiling, current.visibility

    def _worst_overlay(
        self,
        base: ForecastConditions,
        overlays: list[ForecastPeriod],
    ) -> tuple[FlightCategory | None, int | None, float | None]:
        """Worst overlay conditions, ignoring the precedence rules."""
        worst: ForecastConditions | None = None
        worst_cat: FlightCategory | None = None

        for overlay in overlays:
            candidate = overlay.conditions.merged_over(base)
            candidate_category = candidate.category
            if is_worse(candidate_category, worst_cat):
                worst = candidate
                worst_cat = candidate_category

        if worst is None:
            return None, None, None
        return worst_cat, worst.ceiling, worst.visibility


def _inherit(period: ForecastPeriod, initial_base: ForecastPeriod | None) -> ForecastConditions:
    """Conditions of period with omitted elements taken from the initial base."""
    if initial_base is None or period is initial_base:
        return period.conditions
    return period.conditions.merged_over(initial_base.conditions)


def _max_wind(base: Wind | None, overlays: list[ForecastPeriod]) -> Wind | None:
    """Base wind with speed and gust raised to the highest overlay values."""
    direction = base.direction if base is not None else None
    speed = base.speed if base is not None else None
    gust = base.gust if base is not None else None

    for overlay in overlays:
        wind = overlay.conditions.wind
        if wind is None:
            continue
        if wind.speed is not None and (speed is None or wind.speed > speed):
            speed = wind.speed
        if wind.gust is not None and (gust is None or wind.gust > gust):
            gust = wind.gust

    if speed is None and gust is None:
        return base
    return Wind(direction=direction, speed=speed, gust=gust)
