from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app


def _dashboard(city: str = "London") -> Dict[str, Any]:
    return {
        "city": city,
        "current": {
            "city": city,
            "country": "GB",
            "temperature": "36°C",
            "feels_like": "38°C",
            "condition": "Clear",
            "condition_label": "Clear Sky",
            "description": "clear sky",
            "humidity": 40,
            "wind_speed": "10 KMH",
            "visibility": 10.0,
            "observed_at": "12:00 PM",
            "observed_on": "Friday, October 16",
            "icon": "sun",
            "gradient": "yellow-200/orange-300/orange-400",
        },
        "forecast": [
            {
                "date": "2026-10-17",
                "day_name": "Sat",
                "high": "30°C",
                "low": "20°C",
                "condition": "Clear",
                "precipitation_chance": 5,
                "icon": "sun",
            }
        ],
        "notifications": [
            {
                "id": "temperature-extreme-heat-0",
                "category": "temperature",
                "severity": "alert",
                "title": "Extreme Heat Warning",
                "message": "Temperature is 36°C.",
                "icon": "thermometer-sun",
                "style": {"symbol": "alert-circle", "color": "red", "label": "Alert"},
                "timestamp": "2026-10-16T12:00:00Z",
            }
        ],
        "error": None,
        "from_cache": False,
    }


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.searched: List[Optional[str]] = []
        self.location: Optional[tuple[float, float]] = None
        self.dismissed: List[str] = []
        self.preference_changes: List[Dict[str, Any]] = []
        self.closed = False

    def get_weather(self, city: Optional[str] = None) -> Dict[str, Any]:
        self.searched.append(city)
        return _dashboard(city or "London")

    def get_weather_by_location(self, lat: float, lon: float) -> Dict[str, Any]:
        self.location = (lat, lon)
        return _dashboard("Madrid")

    def refresh(self) -> Dict[str, Any]:
        return _dashboard()

    def list_notifications(self) -> List[Dict[str, Any]]:
        return _dashboard()["notifications"]

    def dismiss(self, notification_id: str) -> Dict[str, Any]:
        self.dismissed.append(notification_id)
        return {"id": notification_id, "dismissed": notification_id.startswith("temperature")}

    def dismiss_all(self) -> Dict[str, Any]:
        return {"dismissed": 3}

    def get_preferences(self) -> Dict[str, Any]:
        return {
            "temperatureUnit": "celsius",
            "windUnit": "kmh",
            "timeFormat": "12",
            "notifications": {"temperature": True, "precipitation": True, "wind": True, "comfort": True},
            "notificationTiming": "both",
        }

    def update_preferences(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        self.preference_changes.append(changes)
        return {**self.get_preferences(), **changes}

    def recent_searches(self) -> List[str]:
        return ["Paris", "London"]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def test_weather_for_city(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["weather", "Paris"])

    assert result.exit_code == 0
    assert "Paris, GB" in result.stdout
    assert "Extreme Heat Warning" in result.stdout
    assert "Sat 2026-10-17" in result.stdout
    assert stub.searched == ["Paris"]
    assert stub.closed is True


def test_weather_by_location(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["weather", "--lat", "40.4", "--lon", "-3.7"])

    assert result.exit_code == 0
    assert stub.location == (40.4, -3.7)
    assert "Madrid" in result.stdout


def test_weather_requires_both_coordinates(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["weather", "--lat", "40.4"])

    assert result.exit_code != 0
    assert stub.location is None


def test_base_url_option_reaches_config(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--base-url", "http://dash.test/", "notifications"])

    assert result.exit_code == 0
    assert stub.config.base_url == "http://dash.test"
    assert "Notifications (1)" in result.stdout


def test_dismiss_commands(runner: CliRunner, stub: StubClient) -> None:
    dismissed = runner.invoke(app, ["dismiss", "temperature-extreme-heat-0"])
    missing = runner.invoke(app, ["dismiss", "wind-windy-0"])
    everything = runner.invoke(app, ["dismiss-all"])

    assert "Dismissed temperature-extreme-heat-0." in dismissed.stdout
    assert "No active notification" in missing.stdout
    assert "Dismissed 3 notification(s)." in everything.stdout


def test_set_pref_builds_partial_update(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app,
        ["set-pref", "--wind-unit", "mph", "--disable", "wind", "--enable", "comfort"],
    )

    assert result.exit_code == 0
    assert stub.preference_changes == [
        {"windUnit": "mph", "notifications": {"comfort": True, "wind": False}}
    ]
    assert "windUnit: mph" in result.stdout


def test_set_pref_rejects_unknown_category(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["set-pref", "--disable", "pollen"])

    assert result.exit_code != 0
    assert stub.preference_changes == []


def test_recent_and_prefs(runner: CliRunner, stub: StubClient) -> None:
    recent = runner.invoke(app, ["recent"])
    prefs = runner.invoke(app, ["prefs"])

    assert recent.stdout.splitlines() == ["Paris", "London"]
    assert "temperatureUnit: celsius" in prefs.stdout
    assert "  - wind: on" in prefs.stdout
