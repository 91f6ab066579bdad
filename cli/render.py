from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_STYLE_COLORS = {
    "red": typer.colors.RED,
    "yellow": typer.colors.YELLOW,
    "blue": typer.colors.BLUE,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_notifications(notifications: List[Dict[str, Any]]) -> None:
    echo_heading(f"Notifications ({len(notifications)})")
    if not notifications:
        typer.echo("No notifications at the moment.")
        return
    for notification in notifications:
        style = notification.get("style") or {}
        color = _STYLE_COLORS.get(style.get("color", ""), typer.colors.BLUE)
        typer.secho(
            f"[{style.get('label', notification.get('severity'))}] {notification.get('title')}",
            fg=color,
            bold=True,
        )
        typer.echo(f"  {notification.get('message')}")
        typer.echo(f"  id={notification.get('id')} icon={notification.get('icon')}")


def render_dashboard(payload: Dict[str, Any]) -> None:
    current = payload.get("current") or {}
    if current:
        echo_heading(f"{current.get('city')}, {current.get('country')}")
        echo_key_values(
            [
                ("conditions", current.get("condition_label")),
                ("temperature", current.get("temperature")),
                ("feels_like", current.get("feels_like")),
                ("humidity", f"{current.get('humidity')}%"),
                ("wind", current.get("wind_speed")),
                ("visibility", f"{current.get('visibility')} km"),
                ("observed", f"{current.get('observed_on')} {current.get('observed_at')}"),
            ]
        )
        if payload.get("from_cache"):
            typer.echo("(cached)")
    else:
        typer.echo("No weather data available.")

    forecast = payload.get("forecast") or []
    typer.echo()
    echo_heading("Forecast")
    if forecast:
        for day in forecast:
            typer.echo(
                f"  {day.get('day_name')} {day.get('date')}: {day.get('high')} / {day.get('low')}, "
                f"{day.get('condition')}, {day.get('precipitation_chance')}% rain"
            )
    else:
        typer.echo("No forecast available.")

    error = payload.get("error")
    if error:
        typer.echo()
        typer.secho(error, fg=typer.colors.RED)

    typer.echo()
    render_notifications(payload.get("notifications") or [])


def render_preferences(payload: Dict[str, Any]) -> None:
    echo_heading("Preferences")
    echo_key_values(
        [
            ("temperatureUnit", payload.get("temperatureUnit")),
            ("windUnit", payload.get("windUnit")),
            ("timeFormat", payload.get("timeFormat")),
            ("notificationTiming", payload.get("notificationTiming")),
        ]
    )
    toggles = payload.get("notifications") or {}
    typer.echo("notifications:")
    for category, enabled in toggles.items():
        typer.echo(f"  - {category}: {'on' if enabled else 'off'}")
