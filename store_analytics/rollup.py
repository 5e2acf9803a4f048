import logging

from store_analytics.analytics_utility import business_date, shift_hours
from store_analytics.constants import DEFAULT_TIMEZONE, SOURCE_CLOSEOUT, SOURCE_REGISTER
from store_analytics.normalization import apply_scaling_factor
from store_analytics.sales import day_transactions, reconstruct_day_sales
from store_analytics.summary import DailyRollup, WeatherDay

logger = logging.getLogger(__name__)


def _rollup_for(rollups: dict, store_id: str, date) -> DailyRollup:
    key = (store_id, date)
    if key not in rollups:
        rollups[key] = DailyRollup(store_id=store_id, date=date)
    return rollups[key]


def _merge_weather(rollup: DailyRollup, shift):
    """
    Attach a shift's weather observations to its day.

    The first shift with any observed condition sets both the start and end readings.
    A later shift only fills the end reading, and only while the day's end condition
    is still missing; this is first-start/first-available-end, not latest-wins.
    """
    start = shift.start_weather
    end = shift.end_weather
    start_condition = start.condition if start else None
    end_condition = end.condition if end else None
    if start_condition is None and end_condition is None:
        return

    if rollup.weather is None:
        rollup.weather = WeatherDay(
            date=rollup.date,
            start_condition=start_condition,
            start_desc=start.description if start else None,
            start_temp_f=start.temp_f if start else None,
            end_condition=end_condition,
            end_desc=end.description if end else None,
            end_temp_f=end.temp_f if end else None,
        )
    elif rollup.weather.end_condition is None and end_condition is not None:
        rollup.weather.end_condition = end_condition
        rollup.weather.end_desc = end.description
        rollup.weather.end_temp_f = end.temp_f


def build_rollups(shifts, sales_records, closeouts, timezone: str = DEFAULT_TIMEZONE) -> dict:
    """
    Merge register sales, closeouts, labor and weather into one row per store-day.

    Sales come from the reconstructed register readings; a day without a usable reading
    falls back to the sum of that day's closeout cash and card totals. Labor hours sum
    every shift on the day (open shifts add zero); a day nobody worked keeps
    labor_hours = None. Soft-deleted shifts and draft closeouts are ignored.

    Args:
        shifts (list[ShiftRecord]): Shift clock records.
        sales_records (list[SalesRecord]): Register readings, at most one per store-day.
        closeouts (list[SafeCloseoutRecord]): Safe closeout counts.
        timezone (str): Store-local timezone for shift business dates.

    Returns:
        dict: (store_id, date) -> DailyRollup, ordered by store id then date.
    """
    rollups = {}

    for record in sales_records:
        key = (record.store_id, record.business_date)
        if key in rollups:
            logger.warning(f"Duplicate sales record for store {record.store_id} on {record.business_date}; "
                           f"the later record replaces the earlier one")
        rollup = _rollup_for(rollups, record.store_id, record.business_date)
        rollup.sales_cents = reconstruct_day_sales(record)
        rollup.sales_source = SOURCE_REGISTER if rollup.sales_cents is not None else None
        rollup.transactions = day_transactions(record)

    closeout_sales = {}
    for closeout in closeouts:
        if closeout.is_draft:
            continue
        key = (closeout.store_id, closeout.business_date)
        closeout_sales[key] = closeout_sales.get(key, 0) + closeout.cash_cents + closeout.card_cents

    for (store_id, date), sales in closeout_sales.items():
        rollup = _rollup_for(rollups, store_id, date)
        if rollup.sales_cents is None:
            rollup.sales_cents = sales
            rollup.sales_source = SOURCE_CLOSEOUT

    for shift in shifts:
        if shift.is_deleted:
            continue
        rollup = _rollup_for(rollups, shift.store_id, business_date(shift.planned_start_at, timezone))
        rollup.shift_count += 1
        rollup.labor_hours = (rollup.labor_hours or 0.0) + shift_hours(shift.planned_start_at, shift.ended_at)
        _merge_weather(rollup, shift)

    logger.debug(f"Built {len(rollups)} daily rollups from {len(sales_records)} sales records, "
                 f"{len(closeouts)} closeouts and {len(shifts)} shifts")
    return {key: rollups[key] for key in sorted(rollups)}


def store_rollups(rollups: dict, store_id: str) -> list:
    """Return one store's rollups in date order."""
    return [rollup for (rollup_store_id, _), rollup in rollups.items() if rollup_store_id == store_id]


def apply_store_factors(rollups: dict, factors: dict):
    """Fill adjusted_sales_cents on every rollup from its store's scaling factor."""
    for (store_id, _), rollup in rollups.items():
        rollup.adjusted_sales_cents = apply_scaling_factor(rollup.sales_cents, factors.get(store_id, 1.0))
