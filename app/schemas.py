"""Pydantic schemas shared by the services and the HTTP API layer."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Category(str, Enum):
    """Notification families, in the order the engine evaluates them."""

    temperature = "temperature"
    precipitation = "precipitation"
    wind = "wind"
    comfort = "comfort"


class Severity(str, Enum):
    """Urgency of a notification: info < warning < alert."""

    info = "info"
    warning = "warning"
    alert = "alert"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {Severity.info: 0, Severity.warning: 1, Severity.alert: 2}


class Notification(BaseModel):
    """An advisory derived from one weather analysis."""

    id: str
    category: Category
    severity: Severity
    title: str
    message: str
    icon: str
    timestamp: datetime
    dismissed: bool = False


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class NotificationToggles(_CamelModel):
    """Per-category switches for the rule families."""

    temperature: bool = True
    precipitation: bool = True
    wind: bool = True
    comfort: bool = True

    def enabled(self, category: Category) -> bool:
        return getattr(self, category.value)


class UserPreferences(_CamelModel):
    """User-chosen units and notification settings.

    Serialized with the camelCase keys of the ``weatherAppPreferences`` blob.
    """

    temperature_unit: Literal["celsius", "fahrenheit"] = Field(
        default="celsius", alias="temperatureUnit"
    )
    wind_unit: Literal["kmh", "mph"] = Field(default="kmh", alias="windUnit")
    time_format: Literal["12", "24"] = Field(default="12", alias="timeFormat")
    notifications: NotificationToggles = Field(default_factory=NotificationToggles)
    notification_timing: Literal["morning", "evening", "both"] = Field(
        default="both", alias="notificationTiming"
    )


class SeverityStyle(BaseModel):
    """Display tokens for a severity level."""

    symbol: str
    color: str
    label: str


class NotificationView(BaseModel):
    """A notification paired with its display tokens."""

    id: str
    category: Category
    severity: Severity
    title: str
    message: str
    icon: str
    style: SeverityStyle
    timestamp: datetime


class ReadingView(BaseModel):
    """Current conditions converted to the user's units."""

    city: str
    country: str
    temperature: str
    feels_like: str
    condition: str
    condition_label: str
    description: str
    humidity: int
    wind_speed: str
    visibility: float
    observed_at: str
    observed_on: str
    icon: str
    gradient: str


class ForecastDayView(BaseModel):
    date: date
    day_name: str
    high: str
    low: str
    condition: str
    precipitation_chance: int
    icon: str


class DashboardResponse(BaseModel):
    """Everything the dashboard shows for the current city."""

    city: Optional[str] = None
    current: Optional[ReadingView] = None
    forecast: List[ForecastDayView] = Field(default_factory=list)
    notifications: List[NotificationView] = Field(default_factory=list)
    error: Optional[str] = None
    from_cache: bool = False


class CitySearchRequest(BaseModel):
    city: str = Field(..., description="City name to look up.")


class LocationRequest(BaseModel):
    """Coordinates to load; leave both out to ask the device for its location."""

    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _both_or_neither(self) -> "LocationRequest":
        if (self.lat is None) != (self.lon is None):
            raise ValueError("lat and lon must be given together.")
        return self


class DismissResponse(BaseModel):
    id: str
    dismissed: bool


class DismissAllResponse(BaseModel):
    dismissed: int
