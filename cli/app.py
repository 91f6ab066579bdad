from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_dashboard, render_notifications, render_preferences

CATEGORIES = ("temperature", "precipitation", "wind", "comfort")


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Check the weather dashboard service from the command line.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _check_categories(values: Optional[List[str]]) -> List[str]:
    names = [value.strip().lower() for value in values or []]
    unknown = sorted(set(names) - set(CATEGORIES))
    if unknown:
        raise typer.BadParameter(
            f"Unknown notification category: {', '.join(unknown)}. "
            f"Choose from {', '.join(CATEGORIES)}."
        )
    return names


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Dashboard API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("weather")
def weather_command(
    ctx: typer.Context,
    city: Optional[str] = typer.Argument(None, help="City to look up; omit for the current one."),
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude for a location lookup."),
    lon: Optional[float] = typer.Option(None, "--lon", help="Longitude for a location lookup."),
) -> None:
    """Show current conditions, the forecast and active notifications."""
    state = _get_state(ctx)
    if (lat is None) != (lon is None):
        raise typer.BadParameter("--lat and --lon must be given together.")
    if lat is not None and lon is not None:
        payload = state.client.get_weather_by_location(lat, lon)
    else:
        payload = state.client.get_weather(city)
    render_dashboard(payload)


@app.command("refresh")
def refresh_command(ctx: typer.Context) -> None:
    """Fetch fresh data for the current city."""
    state = _get_state(ctx)
    render_dashboard(state.client.refresh())


@app.command("notifications")
def notifications_command(ctx: typer.Context) -> None:
    """List active notifications."""
    state = _get_state(ctx)
    render_notifications(state.client.list_notifications())


@app.command("dismiss")
def dismiss_command(
    ctx: typer.Context,
    notification_id: str = typer.Argument(..., help="Identifier shown by the notifications command."),
) -> None:
    """Dismiss one notification."""
    state = _get_state(ctx)
    payload = state.client.dismiss(notification_id)
    if payload.get("dismissed"):
        typer.secho(f"Dismissed {notification_id}.", fg=typer.colors.GREEN)
    else:
        typer.echo(f"No active notification with id {notification_id}.")


@app.command("dismiss-all")
def dismiss_all_command(ctx: typer.Context) -> None:
    """Dismiss every notification."""
    state = _get_state(ctx)
    payload = state.client.dismiss_all()
    typer.secho(f"Dismissed {payload.get('dismissed', 0)} notification(s).", fg=typer.colors.GREEN)


@app.command("prefs")
def prefs_command(ctx: typer.Context) -> None:
    """Show the current preferences."""
    state = _get_state(ctx)
    render_preferences(state.client.get_preferences())


@app.command("set-pref")
def set_pref_command(
    ctx: typer.Context,
    temperature_unit: Optional[str] = typer.Option(
        None, "--temperature-unit", help="celsius or fahrenheit."
    ),
    wind_unit: Optional[str] = typer.Option(None, "--wind-unit", help="kmh or mph."),
    time_format: Optional[str] = typer.Option(None, "--time-format", help="12 or 24."),
    timing: Optional[str] = typer.Option(None, "--timing", help="morning, evening or both."),
    enable: Optional[List[str]] = typer.Option(
        None, "--enable", help="Notification category to turn on (repeatable)."
    ),
    disable: Optional[List[str]] = typer.Option(
        None, "--disable", help="Notification category to turn off (repeatable)."
    ),
) -> None:
    """Change one or more preferences."""
    state = _get_state(ctx)
    changes: Dict[str, Any] = {}
    if temperature_unit is not None:
        changes["temperatureUnit"] = temperature_unit
    if wind_unit is not None:
        changes["windUnit"] = wind_unit
    if time_format is not None:
        changes["timeFormat"] = time_format
    if timing is not None:
        changes["notificationTiming"] = timing

    toggles: Dict[str, bool] = {}
    for category in _check_categories(enable):
        toggles[category] = True
    for category in _check_categories(disable):
        toggles[category] = False
    if toggles:
        changes["notifications"] = toggles

    if not changes:
        raise typer.BadParameter("Nothing to change; pass at least one option.")

    render_preferences(state.client.update_preferences(changes))


@app.command("recent")
def recent_command(ctx: typer.Context) -> None:
    """List recently searched cities."""
    state = _get_state(ctx)
    cities = state.client.recent_searches()
    if not cities:
        typer.echo("No recent searches.")
        return
    for city in cities:
        typer.echo(city)
