"""Domain models for weather readings and daily forecasts."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Sequence

MAX_FORECAST_DAYS = 5


@dataclass(frozen=True, slots=True)
class WeatherReading:
    """Current conditions for one city at one instant.

    Temperatures are whole degrees Celsius, wind speed is whole km/h and
    visibility is in kilometres. ``utc_offset`` is the city's shift from UTC
    in seconds.
    """

    city: str
    country: str
    temperature: int
    feels_like: int
    condition: str
    description: str
    humidity: int
    wind_speed: int
    visibility: float
    timestamp: datetime
    icon: str
    utc_offset: int = 0

    def local_time(self) -> datetime:
        """The observation time on the city's own clock."""
        return self.timestamp.astimezone(timezone(timedelta(seconds=self.utc_offset)))

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WeatherReading":
        return cls(
            city=str(payload["city"]),
            country=str(payload["country"]),
            temperature=int(payload["temperature"]),
            feels_like=int(payload["feels_like"]),
            condition=str(payload["condition"]),
            description=str(payload["description"]),
            humidity=int(payload["humidity"]),
            wind_speed=int(payload["wind_speed"]),
            visibility=float(payload["visibility"]),
            timestamp=datetime.fromisoformat(str(payload["timestamp"])),
            icon=str(payload["icon"]),
            utc_offset=int(payload.get("utc_offset", 0)),
        )


@dataclass(frozen=True, slots=True)
class ForecastDay:
    """Summary of one future day."""

    date: date
    day_name: str
    high_temp: int
    low_temp: int
    condition: str
    description: str
    precipitation_chance: int
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["date"] = self.date.isoformat()
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ForecastDay":
        return cls(
            date=date.fromisoformat(str(payload["date"])),
            day_name=str(payload["day_name"]),
            high_temp=int(payload["high_temp"]),
            low_temp=int(payload["low_temp"]),
            condition=str(payload["condition"]),
            description=str(payload["description"]),
            precipitation_chance=int(payload["precipitation_chance"]),
            icon=str(payload["icon"]),
        )


def check_forecast(days: Sequence[ForecastDay]) -> List[ForecastDay]:
    """Validate forecast ordering and length, returning the days as a list.

    Raises ``ValueError`` when there are more than five days or when dates
    are not strictly increasing.
    """
    if len(days) > MAX_FORECAST_DAYS:
        raise ValueError(
            f"Forecast has {len(days)} days; at most {MAX_FORECAST_DAYS} are allowed."
        )
    for previous, current in zip(days, days[1:]):
        if current.date <= previous.date:
            raise ValueError(
                f"Forecast dates must be strictly increasing: {previous.date} then {current.date}."
            )
    return list(days)


def forecast_from_dicts(payloads: Iterable[Mapping[str, Any]]) -> List[ForecastDay]:
    return check_forecast([ForecastDay.from_dict(item) for item in payloads])


@dataclass(frozen=True, slots=True)
class ForecastSample:
    """One three-hourly forecast entry as reported by the provider."""

    timestamp: datetime
    temperature: float
    condition: str
    icon: str
    precipitation_probability: float = 0.0
