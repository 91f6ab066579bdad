"""Async client for the OpenWeatherMap current, forecast and geocoding APIs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from models.weather import ForecastDay, ForecastSample, WeatherReading
from services.forecast import ForecastSummarizer
from services.units import round_half_away
from settings import get_settings

logger = logging.getLogger(__name__)

_MS_TO_KMH = 3.6


class WeatherProviderError(RuntimeError):
    """Raised when the provider cannot be reached or returns unusable data."""


@dataclass(frozen=True)
class CityMatch:
    name: str
    country: str
    lat: float
    lon: float


class OpenWeatherProvider:
    """Fetches readings over HTTP and maps them onto the domain models."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5",
        geo_url: str = "https://api.openweathermap.org/geo/1.0",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        summarizer: Optional[ForecastSummarizer] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._geo_url = geo_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._summarizer = summarizer or ForecastSummarizer()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_current(self, city: str) -> WeatherReading:
        payload = await self._get(f"{self._base_url}/weather", {"q": city, "units": "metric"})
        return self._parse_current(payload)

    async def fetch_forecast(self, city: str) -> List[ForecastDay]:
        payload = await self._get(f"{self._base_url}/forecast", {"q": city, "units": "metric"})
        return self._parse_forecast(payload)

    async def fetch_current_by_coords(self, lat: float, lon: float) -> WeatherReading:
        payload = await self._get(
            f"{self._base_url}/weather", {"lat": lat, "lon": lon, "units": "metric"}
        )
        return self._parse_current(payload)

    async def fetch_forecast_by_coords(self, lat: float, lon: float) -> List[ForecastDay]:
        payload = await self._get(
            f"{self._base_url}/forecast", {"lat": lat, "lon": lon, "units": "metric"}
        )
        return self._parse_forecast(payload)

    async def search_cities(self, query: str) -> List[CityMatch]:
        if not query.strip():
            return []
        payload = await self._get(f"{self._geo_url}/direct", {"q": query, "limit": 5})
        try:
            return [
                CityMatch(
                    name=item["name"],
                    country=item["country"],
                    lat=float(item["lat"]),
                    lon=float(item["lon"]),
                )
                for item in payload
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise WeatherProviderError("Unexpected geocoding payload.") from exc

    async def _get(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            response = await self._client.get(url, params={**params, "appid": self._api_key})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Weather API returned an error",
                extra={"status": exc.response.status_code, "reason": url},
            )
            raise WeatherProviderError(
                f"Weather API request failed with status {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Weather API request failed", extra={"reason": str(exc)})
            raise WeatherProviderError("Weather API request failed.") from exc
        except ValueError as exc:
            raise WeatherProviderError("Weather API returned invalid JSON.") from exc

    @staticmethod
    def _parse_current(payload: Any) -> WeatherReading:
        try:
            weather = payload["weather"][0]
            main = payload["main"]
            return WeatherReading(
                city=payload["name"],
                country=payload["sys"]["country"],
                temperature=round_half_away(main["temp"]),
                feels_like=round_half_away(main["feels_like"]),
                condition=weather["main"],
                description=weather["description"],
                humidity=int(main["humidity"]),
                wind_speed=round_half_away(payload["wind"]["speed"] * _MS_TO_KMH),
                visibility=payload.get("visibility", 10000) / 1000,
                timestamp=datetime.fromtimestamp(payload["dt"], tz=timezone.utc),
                icon=weather["icon"],
                utc_offset=int(payload.get("timezone", 0)),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise WeatherProviderError("Unexpected current weather payload.") from exc

    def _parse_forecast(self, payload: Any) -> List[ForecastDay]:
        try:
            samples = [
                ForecastSample(
                    timestamp=datetime.fromtimestamp(item["dt"], tz=timezone.utc),
                    temperature=float(item["main"]["temp"]),
                    condition=item["weather"][0]["main"],
                    icon=item["weather"][0]["icon"],
                    precipitation_probability=float(item.get("pop") or 0),
                )
                for item in payload["list"]
            ]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise WeatherProviderError("Unexpected forecast payload.") from exc
        return self._summarizer.summarize(samples)


def build_default_provider() -> OpenWeatherProvider:
    settings = get_settings()
    return OpenWeatherProvider(
        api_key=settings.api_key,
        base_url=settings.api_base_url,
        geo_url=settings.geo_api_url,
        timeout=settings.http_timeout,
    )
