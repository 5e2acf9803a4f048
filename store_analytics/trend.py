import numpy as np
import pandas as pd

from store_analytics.analytics_utility import round1, round_half_up, safe_divide
from store_analytics.constants import ROLLING_WINDOW_DAYS, SIGMA_BAND, PCT_MULTIPLIER
from store_analytics.summary import DailyTrendPoint, VolatilitySummary


def _optional_cents(value):
    if value is None or pd.isna(value):
        return None
    return round_half_up(float(value))


def create_rolling_average(series: pd.Series, window_days: int) -> pd.Series:
    """
    Trailing mean over the current value and up to window_days - 1 preceding present values.

    Missing values neither count as zero nor take a slot in the window, and a position
    whose own value is missing yields NaN. The window shrinks at the start of the series
    instead of padding with zeros.

    Args:
        series (pd.Series): Daily values in date order, NaN where absent.
        window_days (int): Maximum number of present values in the window.

    Returns:
        pd.Series: The rolling mean aligned with the input.
    """
    return series.dropna().rolling(window_days, min_periods=1).mean().reindex(series.index)


def build_daily_trend(rollups, window_days: int = ROLLING_WINDOW_DAYS) -> list:
    """
    Build the day-ordered trend series for one store.

    Args:
        rollups (list[DailyRollup]): The store's rollups, adjusted sales already applied.
        window_days (int): Rolling average window, current day included.

    Returns:
        list[DailyTrendPoint]: One point per rollup, ordered by date ascending.
    """
    ordered = sorted(rollups, key=lambda rollup: rollup.date)
    if not ordered:
        return []

    trend_df = pd.DataFrame({
        'Date': [rollup.date for rollup in ordered],
        'Sales': pd.Series([rollup.sales_cents for rollup in ordered], dtype='float64'),
        'AdjustedSales': pd.Series([rollup.adjusted_sales_cents for rollup in ordered], dtype='float64'),
    })
    trend_df['Rolling'] = create_rolling_average(trend_df['Sales'], window_days)
    trend_df['AdjustedRolling'] = create_rolling_average(trend_df['AdjustedSales'], window_days)

    points = []
    for rollup, rolling, adjusted_rolling in zip(ordered, trend_df['Rolling'], trend_df['AdjustedRolling']):
        sales = rollup.sales_cents
        adjusted_sales = rollup.adjusted_sales_cents
        labor = rollup.labor_hours
        points.append(DailyTrendPoint(
            date=rollup.date,
            sales_cents=sales,
            adjusted_sales_cents=adjusted_sales,
            rolling7_sales_cents=_optional_cents(rolling),
            adjusted_rolling7_sales_cents=_optional_cents(adjusted_rolling),
            labor_hours=round1(labor),
            rplh_cents=round_half_up(safe_divide(sales, labor)),
            adjusted_rplh_cents=round_half_up(safe_divide(adjusted_sales, labor)),
            transactions=rollup.transactions,
            basket_size_cents=round_half_up(safe_divide(sales, rollup.transactions)),
            adjusted_basket_size_cents=round_half_up(safe_divide(adjusted_sales, rollup.transactions)),
        ))
    return points


def compute_volatility(points, sigma_band: float = SIGMA_BAND) -> VolatilitySummary:
    """
    Dispersion statistics over the days that have sales.

    Uses the population standard deviation (no Bessel correction). Days strictly below
    mean - sigma_band * stddev and strictly above mean + sigma_band * stddev are
    counted, and the largest day-over-day increase and decrease are reported once at
    least two days exist.

    Args:
        points (list[DailyTrendPoint]): The store's trend series in date order.
        sigma_band (float): Width of the band in standard deviations.

    Returns:
        VolatilitySummary: Statistics; all None/0 when no day had sales.
    """
    sales = np.array([point.sales_cents for point in points if point.sales_cents is not None], dtype=float)
    if sales.size == 0:
        return VolatilitySummary()

    mean = sales.mean()
    std_dev = sales.std()
    below_threshold = mean - sigma_band * std_dev
    above_threshold = mean + sigma_band * std_dev

    largest_up_swing = None
    largest_down_swing = None
    if sales.size > 1:
        deltas = np.diff(sales)
        largest_up_swing = round_half_up(deltas.max())
        largest_down_swing = round_half_up(deltas.min())

    return VolatilitySummary(
        std_dev_daily_sales_cents=round_half_up(std_dev),
        coefficient_of_variation_pct=round1(std_dev / mean * PCT_MULTIPLIER) if mean != 0 else None,
        below_one_sigma_days=int((sales < below_threshold).sum()),
        above_one_sigma_days=int((sales > above_threshold).sum()),
        largest_up_swing_cents=largest_up_swing,
        largest_down_swing_cents=largest_down_swing,
    )
