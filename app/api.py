"""HTTP route definitions for the dashboard service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.schemas import (
    CitySearchRequest,
    DashboardResponse,
    DismissAllResponse,
    DismissResponse,
    ForecastDayView,
    LocationRequest,
    NotificationView,
    ReadingView,
    UserPreferences,
)
from services.dashboard import (
    DashboardSession,
    GeolocationUnavailableError,
    build_default_session,
)
from services.presentation import condition_gradient, condition_label, present, weather_icon
from services.units import (
    convert_temperature,
    convert_wind_speed,
    format_date,
    format_temperature,
    format_time,
    format_wind_speed,
)

router = APIRouter()


def get_session() -> DashboardSession:
    return build_default_session()


def _notification_views(session: DashboardSession) -> List[NotificationView]:
    return [present(notification) for notification in session.active_notifications()]


def _dashboard(session: DashboardSession) -> DashboardResponse:
    prefs = session.preferences.current
    temp_unit = prefs.temperature_unit

    def temperature(celsius: int) -> str:
        return format_temperature(convert_temperature(celsius, temp_unit), temp_unit)

    current = None
    if session.weather is not None:
        weather = session.weather
        current = ReadingView(
            city=weather.city,
            country=weather.country,
            temperature=temperature(weather.temperature),
            feels_like=temperature(weather.feels_like),
            condition=weather.condition,
            condition_label=condition_label(weather.condition),
            description=weather.description,
            humidity=weather.humidity,
            wind_speed=format_wind_speed(
                convert_wind_speed(weather.wind_speed, prefs.wind_unit), prefs.wind_unit
            ),
            visibility=weather.visibility,
            observed_at=format_time(weather.local_time(), prefs.time_format),
            observed_on=format_date(weather.local_time()),
            icon=weather_icon(weather.icon, weather.condition),
            gradient=condition_gradient(weather.condition),
        )

    forecast = [
        ForecastDayView(
            date=day.date,
            day_name=day.day_name,
            high=temperature(day.high_temp),
            low=temperature(day.low_temp),
            condition=day.condition,
            precipitation_chance=day.precipitation_chance,
            icon=weather_icon(day.icon, day.condition),
        )
        for day in session.forecast
    ]

    return DashboardResponse(
        city=session.city,
        current=current,
        forecast=forecast,
        notifications=_notification_views(session),
        error=session.error,
        from_cache=session.from_cache,
    )


def _require_data(session: DashboardSession) -> DashboardResponse:
    if session.weather is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=session.error or "No weather data loaded yet.",
        )
    return _dashboard(session)


@router.get(
    "/weather",
    response_model=DashboardResponse,
    summary="Current conditions, forecast and active notifications.",
)
async def get_weather(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    return _require_data(session)


@router.post(
    "/weather/search",
    response_model=DashboardResponse,
    summary="Load weather for a city and remember the search.",
)
async def search_city(
    request: CitySearchRequest,
    session: DashboardSession = Depends(get_session),
) -> DashboardResponse:
    try:
        loaded = await session.search_city(request.city)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if not loaded:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=session.error)
    return _dashboard(session)


@router.post(
    "/weather/location",
    response_model=DashboardResponse,
    summary="Load weather for coordinates.",
)
async def use_location(
    request: Optional[LocationRequest] = None,
    session: DashboardSession = Depends(get_session),
) -> DashboardResponse:
    try:
        coordinates = request or LocationRequest()
        loaded = await session.use_location(coordinates.lat, coordinates.lon)
    except GeolocationUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    if not loaded:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=session.error)
    return _dashboard(session)


@router.post(
    "/weather/refresh",
    response_model=DashboardResponse,
    summary="Re-fetch the current city; stale data is kept on failure.",
)
async def refresh(session: DashboardSession = Depends(get_session)) -> DashboardResponse:
    await session.refresh()
    return _require_data(session)


@router.get(
    "/notifications",
    response_model=List[NotificationView],
    summary="Active (not dismissed) notifications.",
)
async def list_notifications(
    session: DashboardSession = Depends(get_session),
) -> List[NotificationView]:
    return _notification_views(session)


@router.post(
    "/notifications/dismiss-all",
    response_model=DismissAllResponse,
    summary="Dismiss every notification.",
)
async def dismiss_all(session: DashboardSession = Depends(get_session)) -> DismissAllResponse:
    return DismissAllResponse(dismissed=session.dismiss_all())


@router.post(
    "/notifications/{notification_id}/dismiss",
    response_model=DismissResponse,
    summary="Dismiss one notification; unknown ids are ignored.",
)
async def dismiss(
    notification_id: str,
    session: DashboardSession = Depends(get_session),
) -> DismissResponse:
    return DismissResponse(id=notification_id, dismissed=session.dismiss(notification_id))


@router.get(
    "/preferences",
    response_model=UserPreferences,
    response_model_by_alias=True,
    summary="Current user preferences.",
)
async def get_preferences(session: DashboardSession = Depends(get_session)) -> UserPreferences:
    return session.preferences.current


@router.patch(
    "/preferences",
    response_model=UserPreferences,
    response_model_by_alias=True,
    summary="Update some preferences and re-run the analysis.",
)
async def update_preferences(
    changes: Dict[str, Any] = Body(..., description="Fields to change."),
    session: DashboardSession = Depends(get_session),
) -> UserPreferences:
    try:
        return session.update_preferences(changes)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get(
    "/recent-searches",
    response_model=List[str],
    summary="Most recently searched cities, newest first.",
)
async def recent_searches(session: DashboardSession = Depends(get_session)) -> List[str]:
    return session.recent_searches.recent()


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /weather for the dashboard."}
