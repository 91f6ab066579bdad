from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

import pytest

from models.weather import ForecastDay, WeatherReading

FIXED_NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


def make_reading(**overrides: Any) -> WeatherReading:
    """Build a mild, notification-free reading with selected overrides."""
    values: dict[str, Any] = {
        "city": "London",
        "country": "GB",
        "temperature": 18,
        "feels_like": 17,
        "condition": "Clouds",
        "description": "broken clouds",
        "humidity": 50,
        "wind_speed": 10,
        "visibility": 10.0,
        "timestamp": FIXED_NOW,
        "icon": "04d",
    }
    values.update(overrides)
    return WeatherReading(**values)


def make_day(offset: int = 1, **overrides: Any) -> ForecastDay:
    day = date(2026, 10, 16) + timedelta(days=offset)
    values: dict[str, Any] = {
        "date": day,
        "day_name": day.strftime("%a"),
        "high_temp": 19,
        "low_temp": 12,
        "condition": "Clouds",
        "description": "clouds",
        "precipitation_chance": 10,
        "icon": "04d",
    }
    values.update(overrides)
    return ForecastDay(**values)


@pytest.fixture
def reading_factory():
    return make_reading


@pytest.fixture
def day_factory():
    return make_day
