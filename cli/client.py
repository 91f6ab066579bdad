from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the dashboard service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_weather(self, city: Optional[str] = None) -> Dict[str, Any]:
        if city:
            return self._request("POST", "/weather/search", json={"city": city})
        return self._request("GET", "/weather")

    def get_weather_by_location(self, lat: float, lon: float) -> Dict[str, Any]:
        return self._request("POST", "/weather/location", json={"lat": lat, "lon": lon})

    def refresh(self) -> Dict[str, Any]:
        return self._request("POST", "/weather/refresh")

    def list_notifications(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/notifications")

    def dismiss(self, notification_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/notifications/{notification_id}/dismiss")

    def dismiss_all(self) -> Dict[str, Any]:
        return self._request("POST", "/notifications/dismiss-all")

    def get_preferences(self) -> Dict[str, Any]:
        return self._request("GET", "/preferences")

    def update_preferences(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", "/preferences", json=changes)

    def recent_searches(self) -> List[str]:
        return self._request("GET", "/recent-searches")

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
