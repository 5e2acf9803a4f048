"""
Weather correlation for one store and window.

Summarizes the merged per-day weather observations and raises plain-language flags
when the window had repeated bad weather or large temperature swings, and when
low-sales days coincided with bad weather.
"""
import logging
from typing import Optional

from store_analytics.analytics_utility import most_frequent, round1, round_half_up
from store_analytics.config import DEFAULT_THRESHOLDS, Thresholds
from store_analytics.constants import PCT_MULTIPLIER, WEATHER_TREND_STABLE, WEATHER_TREND_VOLATILE
from store_analytics.summary import WeatherConditionMixEntry, WeatherSummary

logger = logging.getLogger(__name__)


def normalize_condition(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    normalized = value.strip().lower()
    return normalized or None


def is_bad_weather(value: Optional[str], keywords=DEFAULT_THRESHOLDS.bad_weather_keywords) -> bool:
    """Case-insensitive substring match against the bad-weather keywords."""
    normalized = normalize_condition(value)
    if normalized is None:
        return False
    return any(keyword in normalized for keyword in keywords)


def is_bad_weather_day(weather_day, keywords=DEFAULT_THRESHOLDS.bad_weather_keywords) -> bool:
    """A day is bad when any start/end condition or description names bad weather."""
    return any(
        is_bad_weather(value, keywords)
        for value in (weather_day.start_condition, weather_day.start_desc,
                      weather_day.end_condition, weather_day.end_desc)
    )


def _format_degrees(value: float) -> str:
    return f"{value:g}"


def _condition_mix(conditions: list) -> list:
    normalized = [condition for condition in map(normalize_condition, conditions) if condition is not None]
    counts = {}
    for condition in normalized:
        counts[condition] = counts.get(condition, 0) + 1
    mix = [
        WeatherConditionMixEntry(
            condition=condition,
            count=count,
            pct=round_half_up(count / len(normalized) * PCT_MULTIPLIER),
        )
        for condition, count in counts.items()
    ]
    # stable: equal counts keep first-seen order
    return sorted(mix, key=lambda entry: -entry.count)


def summarize_weather(weather_days, daily_sales: dict, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> WeatherSummary:
    """
    Summarize a store's weather for a window and relate it to sales.

    Args:
        weather_days (list[WeatherDay]): Merged observations in date order.
        daily_sales (dict): date -> gross sales cents, for days with sales only.
        thresholds (Thresholds): Keywords and flag thresholds.

    Returns:
        WeatherSummary: Dominant condition, trend, mix, temperatures, flags and the impact
        hint. Everything is None or empty when no day carried weather.
    """
    conditions = [
        condition
        for day in weather_days
        for condition in (day.start_condition, day.end_condition)
        if condition is not None
    ]
    temperatures = [
        temp
        for day in weather_days
        for temp in (day.start_temp_f, day.end_temp_f)
        if temp is not None
    ]

    trend = None
    if conditions:
        trend = WEATHER_TREND_VOLATILE if len(set(conditions)) >= thresholds.volatile_condition_count \
            else WEATHER_TREND_STABLE

    temp_min = min(temperatures) if temperatures else None
    temp_max = max(temperatures) if temperatures else None
    temp_avg = round1(sum(temperatures) / len(temperatures)) if temperatures else None

    bad_dates = {day.date for day in weather_days if is_bad_weather_day(day, thresholds.bad_weather_keywords)}
    swing_days = sum(
        1 for day in weather_days
        if day.start_temp_f is not None and day.end_temp_f is not None
        and abs(day.end_temp_f - day.start_temp_f) >= thresholds.intraday_swing_threshold_f
    )

    outlier_flags = []
    if len(bad_dates) >= thresholds.bad_weather_day_threshold:
        outlier_flags.append(f"{len(bad_dates)} days had rain/storm/fog conditions.")
    if temp_min is not None and temp_max - temp_min >= thresholds.temperature_range_threshold_f:
        outlier_flags.append(
            f"Temperature swing reached {_format_degrees(round1(temp_max - temp_min))}F in this period.")
    if swing_days >= thresholds.intraday_swing_day_threshold:
        outlier_flags.append(
            f"{swing_days} days had intraday temperature swings >= "
            f"{_format_degrees(thresholds.intraday_swing_threshold_f)}F.")

    weather_impact_hint = None
    if daily_sales:
        avg_daily_sales = sum(daily_sales.values()) / len(daily_sales)
        low_and_bad_days = sum(
            1 for date, sales in daily_sales.items()
            if date in bad_dates and sales < avg_daily_sales * thresholds.low_sales_ratio
        )
        if low_and_bad_days > 0:
            weather_impact_hint = f"{low_and_bad_days} low-sales day(s) aligned with poor weather signals."

    if outlier_flags:
        logger.debug(f"Weather outlier flags: {outlier_flags}")

    return WeatherSummary(
        dominant_condition=most_frequent(conditions),
        trend=trend,
        condition_mix=_condition_mix(conditions),
        temp_min_f=temp_min,
        temp_avg_f=temp_avg,
        temp_max_f=temp_max,
        bad_weather_days=len(bad_dates),
        outlier_flags=outlier_flags,
        weather_impact_hint=weather_impact_hint,
    )
