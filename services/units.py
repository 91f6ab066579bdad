"""Unit conversions and display formatting.

All conversions round half away from zero, so ``36.5`` becomes ``37`` and
``-0.5`` becomes ``-1``.
"""

from __future__ import annotations

import math
from datetime import datetime

KMH_TO_MPH = 0.621371
MPH_TO_KMH = 1.60934


def round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def celsius_to_fahrenheit(celsius: float) -> int:
    return round_half_away(celsius * 9 / 5 + 32)


def fahrenheit_to_celsius(fahrenheit: float) -> int:
    return round_half_away((fahrenheit - 32) * 5 / 9)


def kmh_to_mph(kmh: float) -> int:
    return round_half_away(kmh * KMH_TO_MPH)


def mph_to_kmh(mph: float) -> int:
    return round_half_away(mph * MPH_TO_KMH)


def convert_temperature(celsius: int, unit: str) -> int:
    """Express a Celsius reading in the requested unit."""
    return celsius_to_fahrenheit(celsius) if unit == "fahrenheit" else celsius


def convert_wind_speed(kmh: int, unit: str) -> int:
    """Express a km/h reading in the requested unit."""
    return kmh_to_mph(kmh) if unit == "mph" else kmh


def format_temperature(temp: int, unit: str) -> str:
    return f"{temp}°{'F' if unit == 'fahrenheit' else 'C'}"


def format_wind_speed(speed: int, unit: str) -> str:
    return f"{speed} {unit.upper()}"


def format_time(moment: datetime, time_format: str = "12") -> str:
    if time_format == "24":
        return moment.strftime("%H:%M")
    return moment.strftime("%I:%M %p")


def format_date(moment: datetime) -> str:
    return f"{moment:%A, %B} {moment.day}"
