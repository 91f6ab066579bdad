"""Unit tests for the daily forecast summarizer."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from models.weather import ForecastSample, check_forecast
from services.forecast import ForecastSummarizer, most_frequent


def _sample(
    day: int, hour: int, temperature: float, condition: str = "Clouds", pop: float = 0.0
) -> ForecastSample:
    """Helper to build deterministic forecast samples."""

    return ForecastSample(
        timestamp=datetime(2026, 10, day, hour, tzinfo=timezone.utc),
        temperature=temperature,
        condition=condition,
        icon=f"{condition[:2].lower()}{hour}",
        precipitation_probability=pop,
    )


def test_most_frequent_tie_goes_to_value_reaching_top_count_first() -> None:
    assert most_frequent(["Rain", "Clear", "Clear", "Rain"]) == "Clear"
    assert most_frequent(["Rain", "Clear", "Rain", "Clear"]) == "Rain"
    assert most_frequent(["Clear", "Rain", "Rain"]) == "Rain"
    assert most_frequent(["Snow"]) == "Snow"


def test_most_frequent_rejects_empty_input() -> None:
    with pytest.raises(ValueError):
        most_frequent([])


def test_summarize_empty_iterable_returns_empty_forecast() -> None:
    assert ForecastSummarizer().summarize([]) == []


def test_summarize_computes_daily_statistics() -> None:
    samples = [
        _sample(17, 0, 11.4, "Rain", pop=0.9),
        _sample(17, 3, 15.5, "Clouds", pop=0.6),
        _sample(17, 6, 13.0, "Clouds", pop=0.3),
        _sample(17, 9, 9.6, "Rain", pop=0.8),
        _sample(18, 0, 20.0, "Clear"),
    ]

    forecast = ForecastSummarizer().summarize(samples)

    assert [day.date for day in forecast] == [date(2026, 10, 17), date(2026, 10, 18)]
    first = forecast[0]
    assert first.day_name == "Sat"
    assert first.high_temp == 16
    assert first.low_temp == 10
    assert first.condition == "Clouds"
    assert first.description == "clouds"
    assert first.precipitation_chance == 65
    assert first.icon == "ra0"
    assert forecast[1].precipitation_chance == 0


def test_summarize_caps_at_five_days() -> None:
    samples = [_sample(day, 12, 10.0) for day in range(20, 27)]

    forecast = ForecastSummarizer().summarize(samples)

    assert len(forecast) == 5
    assert forecast[-1].date == date(2026, 10, 24)


def test_check_forecast_rejects_duplicates_and_long_sequences() -> None:
    forecast = ForecastSummarizer().summarize([_sample(20, 12, 10.0), _sample(21, 12, 10.0)])

    with pytest.raises(ValueError):
        check_forecast([forecast[0], forecast[0]])
    with pytest.raises(ValueError):
        check_forecast([forecast[1], forecast[0]])
    with pytest.raises(ValueError):
        check_forecast(ForecastSummarizer(max_days=7).summarize(
            [_sample(day, 12, 10.0) for day in range(20, 27)]
        ))
