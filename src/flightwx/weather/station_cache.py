"""Per-station cache with expiry for callers that fetch reports.

The decoding core never caches. Fetch layers keep the latest observation
and forecast per station here instead of in module-level maps.

Typical usage:
    metars = StationCache(ttl=settings.metar_ttl)
    observation = metars.get("EFHK")
    if observation is None:
        observation = parse_metar(fetch_text("EFHK"))
        metars.put("EFHK", observation)
"""

import threading
import time
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from flightwx.core.logging_system import get_logger
from flightwx.settings.weather_settings import DEFAULT_METAR_TTL

logger = get_logger(__name__)

T = TypeVar("T")


class StationCache(Generic[T]):
    """Station-keyed cache whose entries expire after a fixed age.

    Attributes:
        ttl: Entry lifetime in seconds.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_METAR_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache.

        Args:
            ttl: Entry lifetime in seconds (default 10 minutes).
            clock: Time source in seconds, injectable for tests.

        Raises:
            ValueError: If ttl is negative.
        """
        if ttl < 0:
            raise ValueError(f"ttl cannot be negative, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._cache: dict[str, tuple[T, float]] = {}
        self._lock = threading.Lock()

    def get(self, station: str) -> T | None:
        """Get a cached value if still fresh.

        Args:
            station: Station code (case-insensitive).

        Returns:
            Cached value, or None if not cached or expired.
        """
        key = station.upper()
        with self._lock:
            entry = self._cache.get(key)
        if entry is None:
            return None

        value, stored_at = entry
        if self._clock() - stored_at < self.ttl:
            return value
        return None

    def put(self, station: str, value: T) -> None:
        """Store a value for a station, replacing any previous one."""
        with self._lock:
            self._cache[station.upper()] = (value, self._clock())

    def is_stale(self, station: str) -> bool:
        """Check whether a station has no fresh entry."""
        return self.get(station) is None

    def invalidate(self, station: str | None = None) -> None:
        """Invalidate cached entries.

        Args:
            station: Station to invalidate, or None to clear all.
        """
        with self._lock:
            if station is None:
                self._cache.clear()
                logger.debug("Cleared station cache")
            elif station.upper() in self._cache:
                del self._cache[station.upper()]
                logger.debug("Cleared station cache for %s", station)

    def get_cache_info(self) -> dict[str, Any]:
        """Get information about cached entries.

        Returns:
            Dictionary with cache statistics.
        """
        now = self._clock()
        with self._lock:
            items = list(self._cache.items())

        entries = []
        for station, (_, stored_at) in items:
            age = now - stored_at
            entries.append(
                {
                    "station": station,
                    "age_seconds": age,
                    "expires_in": max(0.0, self.ttl - age),
                }
            )
        return {
            "count": len(items),
            "ttl": self.ttl,
            "entries": entries,
        }
