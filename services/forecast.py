"""Daily summaries built from three-hourly forecast samples."""

from __future__ import annotations

from datetime import date, timezone
from typing import Dict, Iterable, List, Sequence, TypeVar

from models.weather import MAX_FORECAST_DAYS, ForecastDay, ForecastSample, check_forecast
from services.units import round_half_away

T = TypeVar("T")

_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def most_frequent(values: Sequence[T]) -> T:
    """Return the most common value; on a tie the value that reached the top count first wins."""
    if not values:
        raise ValueError("Cannot pick the most frequent value of an empty sequence.")
    counts: Dict[T, int] = {}
    best = values[0]
    best_count = 0
    for value in values:
        counts[value] = counts.get(value, 0) + 1
        if counts[value] > best_count:
            best, best_count = value, counts[value]
    return best


class ForecastSummarizer:
    """Pure summarizer that can be unit tested in isolation."""

    def __init__(self, max_days: int = MAX_FORECAST_DAYS) -> None:
        self.max_days = max_days

    def summarize(self, samples: Iterable[ForecastSample]) -> List[ForecastDay]:
        by_day: Dict[date, List[ForecastSample]] = {}
        for sample in samples:
            day = sample.timestamp.astimezone(timezone.utc).date()
            by_day.setdefault(day, []).append(sample)

        forecast: List[ForecastDay] = []
        for day in sorted(by_day)[: self.max_days]:
            forecast.append(self._summarize_day(day, by_day[day]))
        return check_forecast(forecast)

    @staticmethod
    def _summarize_day(day: date, samples: List[ForecastSample]) -> ForecastDay:
        temperatures = [sample.temperature for sample in samples]
        condition = most_frequent([sample.condition for sample in samples])
        mean_pop = sum(sample.precipitation_probability for sample in samples) / len(samples)
        return ForecastDay(
            date=day,
            day_name=_DAY_NAMES[day.weekday()],
            high_temp=round_half_away(max(temperatures)),
            low_temp=round_half_away(min(temperatures)),
            condition=condition,
            description=condition.lower(),
            precipitation_chance=round_half_away(mean_pop * 100),
            icon=samples[0].icon,
        )
