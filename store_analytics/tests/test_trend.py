# SPDX-License-Identifier: Apache-2.0
"""
Behavioral tests for the daily trend series and the volatility block.
"""
import numpy as np
import pandas as pd

from store_analytics.summary import DailyRollup
from store_analytics.tests.conftest import day
from store_analytics.trend import build_daily_trend, compute_volatility, create_rolling_average


def _rollup(date, sales=None, transactions=None, labor=None, adjusted=None):
    return DailyRollup(store_id="store-a", date=day(date), sales_cents=sales, transactions=transactions,
                       labor_hours=labor, adjusted_sales_cents=adjusted if adjusted is not None else sales)


class TestCreateRollingAverage:
    def test_window_shrinks_at_start(self):
        result = create_rolling_average(pd.Series([10.0, 20.0, 30.0]), 2)
        assert list(result) == [10.0, 15.0, 25.0]

    def test_missing_values_are_skipped_not_zero(self):
        result = create_rolling_average(pd.Series([10.0, np.nan, 30.0]), 7)
        assert result[0] == 10.0
        assert pd.isna(result[1])
        assert result[2] == 20.0

    def test_missing_values_do_not_take_a_window_slot(self):
        result = create_rolling_average(pd.Series([10.0, 20.0, np.nan, 30.0]), 2)
        assert result[3] == 25.0


class TestBuildDailyTrend:
    def test_first_point_rolling_is_own_value(self):
        points = build_daily_trend([_rollup("2024-03-04", 1000), _rollup("2024-03-05", 2000)])
        assert points[0].rolling7_sales_cents == 1000
        assert points[1].rolling7_sales_cents == 1500

    def test_ordered_by_date(self):
        points = build_daily_trend([_rollup("2024-03-05", 2000), _rollup("2024-03-04", 1000)])
        assert [point.date for point in points] == [day("2024-03-04"), day("2024-03-05")]

    def test_window_of_seven_days(self):
        rollups = [_rollup(f"2024-03-0{i}", i * 100) for i in range(1, 9)]
        points = build_daily_trend(rollups)
        # days 2..8 -> mean of 200..800
        assert points[-1].rolling7_sales_cents == 500

    def test_window_counts_seven_days_with_sales(self):
        rollups = [_rollup(f"2024-03-0{i}", i * 100) for i in range(1, 7)]
        rollups.append(_rollup("2024-03-07", None, labor=6.0))
        rollups.append(_rollup("2024-03-08", 800, adjusted=1600))
        points = build_daily_trend(rollups)

        labor_only = points[6]
        assert labor_only.sales_cents is None
        assert labor_only.rolling7_sales_cents is None
        assert labor_only.adjusted_rolling7_sales_cents is None
        # 100..600 and 800 -> 2900 / 7
        assert points[-1].rolling7_sales_cents == 414
        # 100..600 and 1600 -> 3700 / 7
        assert points[-1].adjusted_rolling7_sales_cents == 529

    def test_ratios_are_none_without_denominators(self):
        point = build_daily_trend([_rollup("2024-03-04", 1000, transactions=None, labor=0.0)])[0]
        assert point.rplh_cents is None
        assert point.basket_size_cents is None
        assert point.labor_hours == 0.0

    def test_ratios(self):
        point = build_daily_trend([_rollup("2024-03-04", 1000, transactions=3, labor=4.0, adjusted=2000)])[0]
        assert point.rplh_cents == 250
        assert point.adjusted_rplh_cents == 500
        assert point.basket_size_cents == 333
        assert point.adjusted_basket_size_cents == 667

    def test_day_without_sales_has_no_rolling_value_until_sales(self):
        points = build_daily_trend([_rollup("2024-03-04", None, labor=5.0), _rollup("2024-03-05", 800)])
        assert points[0].sales_cents is None
        assert points[0].rolling7_sales_cents is None
        assert points[1].rolling7_sales_cents == 800

    def test_empty(self):
        assert build_daily_trend([]) == []


class TestComputeVolatility:
    def test_single_point(self):
        volatility = compute_volatility(build_daily_trend([_rollup("2024-03-04", 1000)]))
        assert volatility.std_dev_daily_sales_cents == 0
        assert volatility.coefficient_of_variation_pct == 0.0
        assert volatility.largest_up_swing_cents is None
        assert volatility.largest_down_swing_cents is None

    def test_population_standard_deviation_and_swings(self):
        points = build_daily_trend([
            _rollup("2024-03-04", 1000), _rollup("2024-03-05", 3000),
            _rollup("2024-03-06", 2000), _rollup("2024-03-07", 2000),
        ])
        volatility = compute_volatility(points)
        # mean 2000, population variance 500000
        assert volatility.std_dev_daily_sales_cents == 707
        assert volatility.coefficient_of_variation_pct == 35.4
        assert volatility.below_one_sigma_days == 1
        assert volatility.above_one_sigma_days == 1
        assert volatility.largest_up_swing_cents == 2000
        assert volatility.largest_down_swing_cents == -1000

    def test_no_sales_days(self):
        volatility = compute_volatility(build_daily_trend([_rollup("2024-03-04", None, labor=3.0)]))
        assert volatility.std_dev_daily_sales_cents is None
        assert volatility.coefficient_of_variation_pct is None
        assert volatility.below_one_sigma_days == 0

    def test_zero_mean_has_no_coefficient(self):
        volatility = compute_volatility(build_daily_trend([_rollup("2024-03-04", 0), _rollup("2024-03-05", 0)]))
        assert volatility.coefficient_of_variation_pct is None
