# SPDX-License-Identifier: Apache-2.0
"""
Behavioral tests for the weather correlation summary.
"""
from store_analytics.config import Thresholds
from store_analytics.constants import WEATHER_TREND_STABLE, WEATHER_TREND_VOLATILE
from store_analytics.summary import WeatherDay
from store_analytics.tests.conftest import day
from store_analytics.weather import is_bad_weather, normalize_condition, summarize_weather


def _day(date, start=None, end=None, start_temp=None, end_temp=None, start_desc=None, end_desc=None):
    return WeatherDay(date=day(date), start_condition=start, start_desc=start_desc, start_temp_f=start_temp,
                      end_condition=end, end_desc=end_desc, end_temp_f=end_temp)


class TestBadWeather:
    def test_keyword_substring_case_insensitive(self):
        assert is_bad_weather("Thunderstorm")
        assert is_bad_weather("  LIGHT RAIN ")

    def test_clear_is_not_bad(self):
        assert not is_bad_weather("Clear")
        assert not is_bad_weather(None)
        assert not is_bad_weather("   ")

    def test_normalize_condition(self):
        assert normalize_condition(" Clouds ") == "clouds"
        assert normalize_condition("") is None


class TestSummarizeWeather:
    def test_no_weather(self):
        summary = summarize_weather([], {})
        assert summary.dominant_condition is None
        assert summary.trend is None
        assert summary.condition_mix == []
        assert summary.temp_avg_f is None
        assert summary.outlier_flags == []
        assert summary.weather_impact_hint is None

    def test_dominant_trend_and_mix(self):
        days = [
            _day("2024-03-04", "Clear", "Clouds", 50, 58),
            _day("2024-03-05", "Clouds", "Clouds", 55, 60),
        ]
        summary = summarize_weather(days, {})
        assert summary.dominant_condition == "Clouds"
        assert summary.trend == WEATHER_TREND_STABLE
        assert [(entry.condition, entry.count, entry.pct) for entry in summary.condition_mix] == [
            ("clouds", 3, 75), ("clear", 1, 25)]
        assert summary.temp_min_f == 50
        assert summary.temp_max_f == 60
        assert summary.temp_avg_f == 55.8

    def test_volatile_with_three_distinct_conditions(self):
        summary = summarize_weather([_day("2024-03-04", "Clear", "Rain"), _day("2024-03-05", "Snow")], {})
        assert summary.trend == WEATHER_TREND_VOLATILE

    def test_outlier_flags(self):
        days = [
            _day("2024-03-04", "Rain", "Rain", 40, 60),
            _day("2024-03-05", "Clear", "Fog", 35, 55),
            _day("2024-03-06", "Clouds", None, 66, None, start_desc="freezing drizzle"),
        ]
        summary = summarize_weather(days, {})
        assert summary.bad_weather_days == 3
        assert summary.outlier_flags == [
            "3 days had rain/storm/fog conditions.",
            "Temperature swing reached 31F in this period.",
            "2 days had intraday temperature swings >= 18F.",
        ]

    def test_impact_hint_counts_low_sales_bad_days(self):
        days = [_day("2024-03-04", "Rain"), _day("2024-03-05", "Clear"), _day("2024-03-06", "Clear")]
        sales = {day("2024-03-04"): 500, day("2024-03-05"): 1000, day("2024-03-06"): 1000}
        summary = summarize_weather(days, sales)
        assert summary.weather_impact_hint == "1 low-sales day(s) aligned with poor weather signals."

    def test_thresholds_override(self):
        thresholds = Thresholds(bad_weather_keywords=("clouds",), bad_weather_day_threshold=1)
        summary = summarize_weather([_day("2024-03-04", "Clouds")], {}, thresholds)
        assert summary.outlier_flags == ["1 days had rain/storm/fog conditions."]
