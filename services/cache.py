"""Cached dashboard data and recent city searches."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from datastore.kv_store import JsonKeyValueStore
from models.weather import ForecastDay, WeatherReading, forecast_from_dicts

logger = logging.getLogger(__name__)

CACHE_KEY = "weatherCache"
RECENT_SEARCHES_KEY = "recentSearches"
MAX_RECENT_SEARCHES = 5


@dataclass(frozen=True)
class CachedWeather:
    weather: WeatherReading
    forecast: List[ForecastDay]
    city: str
    timestamp: int


def _now_ms() -> int:
    return int(time.time() * 1000)


class WeatherCache:
    """Stores the last successful fetch so a cold start can skip the network."""

    def __init__(
        self,
        store: JsonKeyValueStore,
        ttl_seconds: float = 15 * 60,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._store = store
        self._ttl_ms = int(ttl_seconds * 1000)
        self._clock = clock

    def save(self, weather: WeatherReading, forecast: Sequence[ForecastDay], city: str) -> None:
        self._store.put(
            CACHE_KEY,
            {
                "weather": weather.to_dict(),
                "forecast": [day.to_dict() for day in forecast],
                "city": city,
                "timestamp": self._clock(),
            },
        )

    def load(self) -> Optional[CachedWeather]:
        """Return the cached entry if it is younger than the TTL."""
        raw = self._store.get(CACHE_KEY)
        if raw is None:
            return None
        try:
            cached = CachedWeather(
                weather=WeatherReading.from_dict(raw["weather"]),
                forecast=forecast_from_dicts(raw["forecast"]),
                city=str(raw["city"]),
                timestamp=int(raw["timestamp"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Ignoring malformed weather cache", extra={"key": CACHE_KEY, "reason": str(exc)}
            )
            return None

        age = self._clock() - cached.timestamp
        if age >= self._ttl_ms:
            logger.debug("Weather cache expired", extra={"city": cached.city})
            return None
        return cached


class RecentSearches:
    """Most-recent-first list of searched cities, without duplicates."""

    def __init__(self, store: JsonKeyValueStore, limit: int = MAX_RECENT_SEARCHES) -> None:
        self._store = store
        self._limit = limit

    def recent(self) -> List[str]:
        raw = self._store.get(RECENT_SEARCHES_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed recent searches", extra={"key": RECENT_SEARCHES_KEY})
            return []
        return [city for city in raw if isinstance(city, str)][: self._limit]

    def add(self, city: str) -> List[str]:
        updated = [city, *(item for item in self.recent() if item != city)][: self._limit]
        self._store.put(RECENT_SEARCHES_KEY, updated)
        return updated
