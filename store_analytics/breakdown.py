"""
Day-of-week and shift-type breakdowns.

Every average has its own denominator: a day missing a transaction count still counts
towards the sales average, and vice versa. pandas' NaN-skipping groupby aggregations
give exactly that behaviour, so absent values are loaded as NaN and never as zero.
"""
import pandas as pd

from store_analytics.analytics_utility import day_name, round1, round_half_up, safe_divide, shift_hours
from store_analytics.constants import DAY_NAMES, SHIFT_KINDS
from store_analytics.summary import DayOfWeekAveragesRow, ShiftTypeBreakdownRow, VelocityEntry


def _value(cell):
    """Convert a pandas cell to a plain float, NaN becoming None."""
    if cell is None or pd.isna(cell):
        return None
    return float(cell)


def _float_series(values) -> pd.Series:
    return pd.Series(values, dtype='float64')


def build_day_of_week_averages(rollups) -> list:
    """
    Average each metric by weekday across one store's rollups.

    Args:
        rollups (list[DailyRollup]): The store's rollups for the window.

    Returns:
        list[DayOfWeekAveragesRow]: Seven rows, Sunday through Saturday. Weekdays without
        any rollup have sample_days = 0 and every average None.
    """
    if not rollups:
        return [DayOfWeekAveragesRow(day=day) for day in DAY_NAMES]

    daily_df = pd.DataFrame({
        'Day': [day_name(rollup.date) for rollup in rollups],
        'Sales': _float_series([rollup.sales_cents for rollup in rollups]),
        'Transactions': _float_series([rollup.transactions for rollup in rollups]),
        'Basket': _float_series([safe_divide(rollup.sales_cents, rollup.transactions) for rollup in rollups]),
        'LaborHours': _float_series([rollup.labor_hours for rollup in rollups]),
        'Rplh': _float_series([safe_divide(rollup.sales_cents, rollup.labor_hours) for rollup in rollups]),
    })
    grouped = daily_df.groupby('Day')
    means = grouped.mean()
    sizes = grouped.size()

    rows = []
    for day in DAY_NAMES:
        if day not in sizes.index:
            rows.append(DayOfWeekAveragesRow(day=day))
            continue
        day_means = means.loc[day]
        rows.append(DayOfWeekAveragesRow(
            day=day,
            avg_sales_cents=round_half_up(_value(day_means['Sales'])),
            avg_transactions=round1(_value(day_means['Transactions'])),
            avg_basket_size_cents=round_half_up(_value(day_means['Basket'])),
            avg_labor_hours=round1(_value(day_means['LaborHours'])),
            avg_rplh_cents=round_half_up(_value(day_means['Rplh'])),
            sample_days=int(sizes.loc[day]),
        ))
    return rows


def build_shift_type_breakdown(shifts, sales_index) -> list:
    """
    Average shift-level sales metrics by shift kind.

    Only ended shifts are sampled. Basket size divides the sales of shifts that carry a
    transaction count by those shifts' transactions, so shifts without counts do not
    skew it; RPLH divides sales by the labor of the shifts that had sales.

    Args:
        shifts (list[ShiftRecord]): One store's active shifts for the window.
        sales_index (SalesIndex): The store's register readings.

    Returns:
        list[ShiftTypeBreakdownRow]: One row per observed kind, highest average sales first.
    """
    kinds, sales, transactions, tracked_sales, tracked_transactions, sales_labor = [], [], [], [], [], []
    for shift in shifts:
        if shift.ended_at is None:
            continue
        shift_sales = sales_index.shift_sales(shift)
        shift_txn = sales_index.shift_transactions(shift)
        is_tracked = shift_sales is not None and shift_txn is not None
        kinds.append(shift.shift_kind)
        sales.append(shift_sales)
        transactions.append(shift_txn)
        tracked_sales.append(shift_sales if is_tracked else None)
        tracked_transactions.append(shift_txn if is_tracked else None)
        sales_labor.append(shift_hours(shift.planned_start_at, shift.ended_at) if shift_sales is not None else None)

    if not kinds:
        return []

    shift_df = pd.DataFrame({
        'Kind': kinds,
        'Sales': _float_series(sales),
        'Transactions': _float_series(transactions),
        'TrackedSales': _float_series(tracked_sales),
        'TrackedTransactions': _float_series(tracked_transactions),
        'SalesLabor': _float_series(sales_labor),
    })
    grouped = shift_df.groupby('Kind', sort=False)
    sums = grouped.sum(min_count=1)
    counts = grouped.count()
    sizes = grouped.size()

    rows = []
    for kind in sizes.index:
        kind_sums = sums.loc[kind]
        kind_counts = counts.loc[kind]
        rows.append(ShiftTypeBreakdownRow(
            shift_type=kind,
            avg_sales_cents=round_half_up(safe_divide(_value(kind_sums['Sales']), int(kind_counts['Sales']))),
            avg_transactions=round1(
                safe_divide(_value(kind_sums['Transactions']), int(kind_counts['Transactions']))),
            avg_basket_cents=round_half_up(
                safe_divide(_value(kind_sums['TrackedSales']), _value(kind_sums['TrackedTransactions']))),
            avg_rplh_cents=round_half_up(safe_divide(_value(kind_sums['Sales']), _value(kind_sums['SalesLabor']))),
            sample_size=int(sizes.loc[kind]),
        ))

    # stable: equal averages keep the open/close/double/other order
    rows.sort(key=lambda row: SHIFT_KINDS.index(row.shift_type))
    rows.sort(key=lambda row: (row.avg_sales_cents is None, -(row.avg_sales_cents or 0)))
    return rows


def best_and_worst_day(day_rows):
    """
    Pick the weekdays with the highest and lowest average sales.

    Ties keep the Sunday-first weekday order, so the earlier weekday is "best" and the
    later one "worst".

    Returns:
        tuple: (best VelocityEntry or None, worst VelocityEntry or None)
    """
    entries = [
        VelocityEntry(
            label=row.day,
            avg_sales_cents=row.avg_sales_cents,
            avg_transactions=row.avg_transactions,
            sample_count=row.sample_days,
        )
        for row in day_rows
        if row.avg_sales_cents is not None
    ]
    if not entries:
        return None, None
    entries.sort(key=lambda entry: -entry.avg_sales_cents)
    return entries[0], entries[-1]


def best_shift_type(type_rows):
    for row in type_rows:
        if row.avg_sales_cents is not None:
            return VelocityEntry(
                label=row.shift_type,
                avg_sales_cents=row.avg_sales_cents,
                avg_transactions=row.avg_transactions,
                sample_count=row.sample_size,
            )
    return None
