"""Dashboard session: fetches, caches and analyzes weather for one user."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

from app.schemas import Notification, UserPreferences
from datastore.kv_store import build_default_store
from models.weather import ForecastDay, WeatherReading
from services.cache import RecentSearches, WeatherCache
from services.preferences import PreferenceStore
from services.provider import OpenWeatherProvider, WeatherProviderError, build_default_provider
from services.registry import NotificationRegistry
from services.rules import NotificationEngine
from settings import get_settings

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch weather data. Please try again."
LOCATION_FAILED_MESSAGE = "Unable to get your current location. Please search for a city manually."
GEOLOCATION_UNSUPPORTED_MESSAGE = "Geolocation is not supported by this client."

LocationProvider = Callable[[], Awaitable[Tuple[float, float]]]


class GeolocationUnavailableError(RuntimeError):
    """Raised when coordinates are requested but no location source exists."""

    def __init__(self) -> None:
        super().__init__(GEOLOCATION_UNSUPPORTED_MESSAGE)


class DashboardSession:
    """Coordinates the provider, the rule engine and the stores.

    All methods are meant to be called from one event loop. A failed fetch
    keeps the previous reading, forecast and notifications in place.
    """

    def __init__(
        self,
        provider: OpenWeatherProvider,
        engine: NotificationEngine,
        registry: NotificationRegistry,
        preferences: PreferenceStore,
        cache: WeatherCache,
        recent_searches: RecentSearches,
        default_city: str = "London",
        refresh_interval: float = 15 * 60,
        location_provider: Optional[LocationProvider] = None,
    ) -> None:
        self.provider = provider
        self.engine = engine
        self.registry = registry
        self.preferences = preferences
        self.cache = cache
        self.recent_searches = recent_searches
        self.default_city = default_city
        self.refresh_interval = refresh_interval
        self.location_provider = location_provider

        self.city: Optional[str] = None
        self.weather: Optional[WeatherReading] = None
        self.forecast: List[ForecastDay] = []
        self.error: Optional[str] = None
        self.from_cache = False
        self.loading = False
        self._refresh_task: Optional[asyncio.Task[None]] = None

    async def open(self) -> None:
        """Restore preferences and show cached data, fetching if the cache is stale."""
        self.preferences.load()
        cached = self.cache.load()
        if cached is not None:
            logger.info("Using cached weather", extra={"city": cached.city})
            self._apply(cached.city, cached.weather, cached.forecast, from_cache=True)
            return
        await self.load_city(self.default_city)

    async def load_city(self, city: str) -> bool:
        return await self._load(
            city,
            lambda: asyncio.gather(
                self.provider.fetch_current(city), self.provider.fetch_forecast(city)
            ),
            FETCH_FAILED_MESSAGE,
        )

    async def search_city(self, city: str) -> bool:
        name = city.strip()
        if not name:
            raise ValueError("City name must not be blank.")
        loaded = await self.load_city(name)
        if loaded:
            self._remember_search(name)
        return loaded

    async def use_location(
        self, lat: Optional[float] = None, lon: Optional[float] = None
    ) -> bool:
        """Load weather for coordinates, asking the location provider when none are given."""
        if lat is None or lon is None:
            if self.location_provider is None:
                raise GeolocationUnavailableError()
            try:
                lat, lon = await self.location_provider()
            except Exception as exc:  # noqa: BLE001 - any location failure is user-facing
                logger.warning("Location lookup failed", extra={"reason": str(exc)})
                self.error = LOCATION_FAILED_MESSAGE
                return False

        logger.info("Loading weather by coordinates", extra={"lat": lat, "lon": lon})
        return await self._load(
            None,
            lambda: asyncio.gather(
                self.provider.fetch_current_by_coords(lat, lon),
                self.provider.fetch_forecast_by_coords(lat, lon),
            ),
            LOCATION_FAILED_MESSAGE,
        )

    async def refresh(self) -> bool:
        if not self.city:
            return False
        return await self.load_city(self.city)

    def update_preferences(self, partial: Mapping[str, Any]) -> UserPreferences:
        """Persist a settings change and re-run the analysis with it."""
        updated = self.preferences.save(partial)
        self._analyze()
        return updated

    def active_notifications(self) -> List[Notification]:
        return self.registry.active_list()

    def dismiss(self, notification_id: str) -> bool:
        return self.registry.dismiss(notification_id)

    def dismiss_all(self) -> int:
        return self.registry.dismiss_all()

    def start_auto_refresh(self) -> None:
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._auto_refresh())

    async def close(self) -> None:
        """Cancel the refresh timer and release the HTTP client."""
        task, self._refresh_task = self._refresh_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self.provider.aclose()

    async def _auto_refresh(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            if self.loading:
                continue
            try:
                await self.refresh()
            except Exception:  # noqa: BLE001 - keep the timer alive
                logger.exception("Scheduled refresh failed", extra={"city": self.city})

    async def _load(
        self,
        city: Optional[str],
        fetch: Callable[[], Awaitable[Tuple[WeatherReading, List[ForecastDay]]]],
        failure_message: str,
    ) -> bool:
        self.loading = True
        try:
            weather, forecast = await fetch()
        except WeatherProviderError as exc:
            logger.warning(
                "Weather fetch failed; keeping previous data",
                extra={"city": city, "reason": str(exc)},
            )
            self.error = failure_message
            return False
        finally:
            self.loading = False

        resolved_city = city or weather.city
        self._apply(resolved_city, weather, forecast, from_cache=False)
        try:
            self.cache.save(weather, forecast, resolved_city)
        except OSError as exc:
            logger.warning("Could not cache weather", extra={"city": resolved_city, "reason": str(exc)})
        return True

    def _apply(
        self,
        city: str,
        weather: WeatherReading,
        forecast: List[ForecastDay],
        from_cache: bool,
    ) -> None:
        self.city = city
        self.weather = weather
        self.forecast = list(forecast)
        self.from_cache = from_cache
        self.error = None
        self._analyze()

    def _analyze(self) -> None:
        if self.weather is None:
            return
        batch = self.engine.analyze(self.weather, self.forecast, self.preferences.current)
        self.registry.replace(batch)

    def _remember_search(self, city: str) -> None:
        try:
            self.recent_searches.add(city)
        except OSError as exc:
            logger.warning("Could not store recent search", extra={"city": city, "reason": str(exc)})


@lru_cache
def build_default_session() -> DashboardSession:
    """Factory that wires the session with the configured provider and store."""
    settings = get_settings()
    store = build_default_store()
    return DashboardSession(
        provider=build_default_provider(),
        engine=NotificationEngine(),
        registry=NotificationRegistry(store=store),
        preferences=PreferenceStore(store),
        cache=WeatherCache(store, ttl_seconds=settings.cache_ttl),
        recent_searches=RecentSearches(store),
        default_city=settings.default_city,
        refresh_interval=settings.refresh_interval,
    )
