from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_KEY_ENV = "WEATHER_API_KEY"
_API_BASE_URL_ENV = "WEATHER_API_BASE_URL"
_GEO_API_URL_ENV = "WEATHER_GEO_API_URL"
_STORE_PATH_ENV = "WEATHER_STORE_PATH"
_DEFAULT_CITY_ENV = "WEATHER_DEFAULT_CITY"
_REFRESH_INTERVAL_ENV = "WEATHER_REFRESH_INTERVAL"
_CACHE_TTL_ENV = "WEATHER_CACHE_TTL"
_HTTP_TIMEOUT_ENV = "WEATHER_HTTP_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

FIFTEEN_MINUTES = 15 * 60


@dataclass(frozen=True)
class Settings:
    api_key: str
    api_base_url: str
    geo_api_url: str
    store_path: Optional[str]
    default_city: str
    refresh_interval: float
    cache_ttl: float
    http_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_key=os.getenv(_API_KEY_ENV, "").strip(),
        api_base_url=_read_str_env(
            _API_BASE_URL_ENV, "https://api.openweathermap.org/data/2.5"
        ).rstrip("/"),
        geo_api_url=_read_str_env(
            _GEO_API_URL_ENV, "https://api.openweathermap.org/geo/1.0"
        ).rstrip("/"),
        store_path=_read_optional_env(_STORE_PATH_ENV, "./tmp/weather_store.json"),
        default_city=_read_str_env(_DEFAULT_CITY_ENV, "London"),
        refresh_interval=_read_positive_float(_REFRESH_INTERVAL_ENV, FIFTEEN_MINUTES),
        cache_ttl=_read_positive_float(_CACHE_TTL_ENV, FIFTEEN_MINUTES),
        http_timeout=_read_positive_float(_HTTP_TIMEOUT_ENV, 10.0),
        log_level=_read_log_level("INFO"),
    )
