"""Display tokens for notifications and weather conditions."""

from __future__ import annotations

from typing import Optional

from app.schemas import Category, Notification, NotificationView, Severity, SeverityStyle

FALLBACK_NOTIFICATION_ICON = "bell"
FALLBACK_WEATHER_ICON = "thermometer"


def notification_icon(category: Category, icon_tag: str) -> str:
    """Map a notification icon tag to an icon identifier."""
    match icon_tag:
        case "thermometer-sun" | "thermometer-snowflake" | "thermometer":
            return icon_tag
        case "umbrella" | "cloud-rain":
            return icon_tag
        case "wind" | "droplets" | "eye-off" | "shirt" | "trending-up":
            return icon_tag
        case _:
            return _category_icon(category)


def _category_icon(category: Category) -> str:
    match category:
        case Category.temperature:
            return "thermometer"
        case Category.precipitation:
            return "cloud-rain"
        case Category.wind:
            return "wind"
        case Category.comfort:
            return FALLBACK_NOTIFICATION_ICON


def severity_style(severity: Severity) -> SeverityStyle:
    match severity:
        case Severity.alert:
            return SeverityStyle(symbol="alert-circle", color="red", label="Alert")
        case Severity.warning:
            return SeverityStyle(symbol="alert-triangle", color="yellow", label="Warning")
        case _:
            return SeverityStyle(symbol="info", color="blue", label="Info")


def present(notification: Notification) -> NotificationView:
    return NotificationView(
        id=notification.id,
        category=notification.category,
        severity=notification.severity,
        title=notification.title,
        message=notification.message,
        icon=notification_icon(notification.category, notification.icon),
        style=severity_style(notification.severity),
        timestamp=notification.timestamp,
    )


def condition_label(condition: str) -> str:
    match condition:
        case "Clear":
            return "Clear Sky"
        case "Clouds":
            return "Cloudy"
        case "Rain":
            return "Rainy"
        case "Drizzle":
            return "Light Rain"
        case "Snow":
            return "Snowy"
        case "Thunderstorm":
            return "Thunderstorm"
        case "Mist":
            return "Misty"
        case "Fog":
            return "Foggy"
        case _:
            return condition


def condition_gradient(condition: str) -> str:
    """Background gradient token for a condition; unknown ones look like Clear."""
    match condition:
        case "Clouds":
            return "gray-200/gray-300/gray-400"
        case "Rain":
            return "blue-200/blue-400/blue-600"
        case "Drizzle":
            return "blue-200/blue-300/blue-400"
        case "Snow":
            return "gray-100/blue-100/blue-200"
        case "Thunderstorm":
            return "gray-400/gray-600/gray-800"
        case "Mist" | "Fog":
            return "gray-200/gray-300/blue-200"
        case _:
            return "yellow-200/orange-300/orange-400"


def weather_icon(icon_code: Optional[str], condition: str) -> str:
    """Map a provider icon code (``01d``, ``10n``...) to an icon identifier."""
    match (icon_code or "")[:2]:
        case "01":
            return "sun"
        case "02" | "03" | "04":
            return "cloud"
        case "09" | "10":
            return "cloud-rain"
        case "11":
            return "cloud-lightning"
        case "13":
            return "cloud-snow"
        case "50":
            return "eye-off"
    return _condition_icon(condition.lower())


def _condition_icon(condition: str) -> str:
    if "clear" in condition or "sun" in condition:
        return "sun"
    if "cloud" in condition:
        return "cloud"
    if "rain" in condition or "drizzle" in condition:
        return "cloud-rain"
    if "snow" in condition:
        return "cloud-snow"
    if "thunder" in condition or "storm" in condition:
        return "cloud-lightning"
    if "wind" in condition or "breeze" in condition:
        return "wind"
    if "mist" in condition or "fog" in condition:
        return "eye-off"
    return FALLBACK_WEATHER_ICON
