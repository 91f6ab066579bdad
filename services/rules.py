"""Threshold rules that turn weather readings into notifications."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Sequence

from app.schemas import Category, Notification, Severity, UserPreferences
from models.weather import ForecastDay, WeatherReading
from services.units import KMH_TO_MPH, round_half_away

logger = logging.getLogger(__name__)

# Temperatures in °C.
EXTREME_HEAT = 35
HEAT_WARNING = 30
COLD_WARNING = 5
EXTREME_COLD = -5  # not used by any rule yet
TEMPERATURE_CHANGE = 10

# Rain rates in mm/hour; the provider does not report rates, so no rule uses them.
LIGHT_RAIN = 0.1
MODERATE_RAIN = 2.5
HEAVY_RAIN = 10
HIGH_PRECIPITATION_CHANCE = 70

# Wind speeds in mph.
BREEZY = 15  # not used by any rule yet
WINDY = 25
VERY_WINDY = 40

HIGH_HUMIDITY = 80
LOW_VISIBILITY_KM = 5
COLD_CLOTHING = 10
HOT_CLOTHING = 25

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationEngine:
    """Runs the four rule families against one set of readings.

    The engine keeps no state between calls. Identifiers are built from the
    category, the rule name and a key (the forecast date for per-day rules),
    so two rules firing in the same call never collide and a dismissed
    per-day warning never carries over to a different day.
    """

    def __init__(self, clock: Clock = _utcnow) -> None:
        self._clock = clock

    def analyze(
        self,
        current: WeatherReading,
        forecast: Sequence[ForecastDay],
        prefs: UserPreferences,
    ) -> List[Notification]:
        now = self._clock()
        families = (
            (Category.temperature, self._temperature),
            (Category.precipitation, self._precipitation),
            (Category.wind, self._wind),
            (Category.comfort, self._comfort),
        )

        notifications: List[Notification] = []
        for category, family in families:
            if not prefs.notifications.enabled(category):
                continue
            notifications.extend(family(current, forecast, prefs, now))

        logger.info(
            "Weather analysis complete",
            extra={"city": current.city, "notification_count": len(notifications)},
        )
        return notifications

    def _temperature(
        self,
        current: WeatherReading,
        forecast: Sequence[ForecastDay],
        prefs: UserPreferences,
        now: datetime,
    ) -> List[Notification]:
        found: List[Notification] = []
        temp = current.temperature

        if temp >= EXTREME_HEAT:
            found.append(
                _notify(
                    Category.temperature,
                    "extreme-heat",
                    Severity.alert,
                    "Extreme Heat Warning",
                    f"Temperature is {temp}°C. Stay hydrated, avoid outdoor activities "
                    "during peak hours, and check on vulnerable individuals.",
                    "thermometer-sun",
                    now,
                )
            )
        elif temp >= HEAT_WARNING:
            found.append(
                _notify(
                    Category.temperature,
                    "heat",
                    Severity.warning,
                    "Heat Advisory",
                    f"High temperature of {temp}°C. Consider lighter clothing and stay hydrated.",
                    "thermometer",
                    now,
                )
            )
        elif temp <= COLD_WARNING:
            found.append(
                _notify(
                    Category.temperature,
                    "cold",
                    Severity.warning,
                    "Cold Weather Alert",
                    f"Low temperature of {temp}°C. Bundle up and consider indoor activities.",
                    "thermometer-snowflake",
                    now,
                )
            )

        if forecast:
            change = forecast[0].high_temp - temp
            if abs(change) >= TEMPERATURE_CHANGE:
                direction = "rise" if change > 0 else "drop"
                found.append(
                    _notify(
                        Category.temperature,
                        "change",
                        Severity.info,
                        "Significant Temperature Change",
                        f"Temperature will {direction} by {abs(change)}°C tomorrow. "
                        "Plan your activities accordingly.",
                        "trending-up",
                        now,
                    )
                )

        return found

    def _precipitation(
        self,
        current: WeatherReading,
        forecast: Sequence[ForecastDay],
        prefs: UserPreferences,
        now: datetime,
    ) -> List[Notification]:
        found: List[Notification] = []

        if "rain" in current.condition.lower():
            found.append(
                _notify(
                    Category.precipitation,
                    "current-rain",
                    Severity.info,
                    "Rain Alert",
                    f"Current conditions: {current.condition}. Don't forget your umbrella!",
                    "umbrella",
                    now,
                )
            )

        for index, day in enumerate(forecast):
            if day.precipitation_chance <= HIGH_PRECIPITATION_CHANCE:
                continue
            when = "tomorrow" if index == 0 else f"on {day.day_name}"
            found.append(
                _notify(
                    Category.precipitation,
                    "high-chance",
                    Severity.warning,
                    "High Precipitation Chance",
                    f"{day.precipitation_chance}% chance of rain {when}. "
                    "Plan outdoor activities accordingly.",
                    "cloud-rain",
                    now,
                    key=day.date.isoformat(),
                )
            )

        return found

    def _wind(
        self,
        current: WeatherReading,
        forecast: Sequence[ForecastDay],
        prefs: UserPreferences,
        now: datetime,
    ) -> List[Notification]:
        speed_mph = (
            current.wind_speed * KMH_TO_MPH if prefs.wind_unit == "kmh" else current.wind_speed
        )
        shown = round_half_away(speed_mph)

        if speed_mph >= VERY_WINDY:
            return [
                _notify(
                    Category.wind,
                    "very-windy",
                    Severity.alert,
                    "High Wind Warning",
                    f"Wind speed is {shown} mph. Avoid outdoor activities and secure loose objects.",
                    "wind",
                    now,
                )
            ]
        if speed_mph >= WINDY:
            return [
                _notify(
                    Category.wind,
                    "windy",
                    Severity.warning,
                    "Windy Conditions",
                    f"Windy conditions with {shown} mph winds. Consider indoor activities.",
                    "wind",
                    now,
                )
            ]
        return []

    def _comfort(
        self,
        current: WeatherReading,
        forecast: Sequence[ForecastDay],
        prefs: UserPreferences,
        now: datetime,
    ) -> List[Notification]:
        found: List[Notification] = []

        if current.humidity > HIGH_HUMIDITY:
            found.append(
                _notify(
                    Category.comfort,
                    "humidity",
                    Severity.info,
                    "High Humidity",
                    f"Humidity is {current.humidity}%. "
                    "It may feel warmer than the actual temperature.",
                    "droplets",
                    now,
                )
            )

        if current.visibility < LOW_VISIBILITY_KM:
            found.append(
                _notify(
                    Category.comfort,
                    "visibility",
                    Severity.warning,
                    "Reduced Visibility",
                    f"Visibility is reduced to {current.visibility:g} km. "
                    "Drive carefully and use caution outdoors.",
                    "eye-off",
                    now,
                )
            )

        temp = current.temperature
        if temp < COLD_CLOTHING:
            found.append(
                _notify(
                    Category.comfort,
                    "clothing-cold",
                    Severity.info,
                    "Clothing Recommendation",
                    f"It is {temp}°C. Wear warm clothing including a jacket, hat, and gloves.",
                    "shirt",
                    now,
                )
            )
        elif temp > HOT_CLOTHING:
            found.append(
                _notify(
                    Category.comfort,
                    "clothing-hot",
                    Severity.info,
                    "Clothing Recommendation",
                    f"It is {temp}°C. Light, breathable clothing recommended. "
                    "Don't forget sunscreen!",
                    "shirt",
                    now,
                )
            )

        return found


def _notify(
    category: Category,
    rule: str,
    severity: Severity,
    title: str,
    message: str,
    icon: str,
    now: datetime,
    key: str = "0",
) -> Notification:
    notification_id = f"{category.value}-{rule}-{key}"
    logger.debug(
        "Rule fired",
        extra={"category": category.value, "rule": rule, "notification_id": notification_id},
    )
    return Notification(
        id=notification_id,
        category=category,
        severity=severity,
        title=title,
        message=message,
        icon=icon,
        timestamp=now,
    )
