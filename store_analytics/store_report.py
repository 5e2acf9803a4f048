import datetime
import logging
from typing import Optional

from store_analytics.analytics_utility import (
    business_date, date_range, in_date_range, round1, round_half_up, safe_divide, sum_or_none
)
from store_analytics.breakdown import (
    best_and_worst_day, best_shift_type, build_day_of_week_averages, build_shift_type_breakdown
)
from store_analytics.config import DEFAULT_THRESHOLDS, Thresholds
from store_analytics.constants import PCT_MULTIPLIER
from store_analytics.normalization import StoreTotals, compute_scaling_factors
from store_analytics.performers import rank_top_performers
from store_analytics.records import RecordSet, StoreRecord
from store_analytics.rollup import apply_store_factors, build_rollups, store_rollups
from store_analytics.sales import SalesIndex
from store_analytics.summary import (
    CashMix, CashRiskSummary, DataIntegritySummary, StorePeriodSummary, StorePreviousDeltas
)
from store_analytics.trend import build_daily_trend, compute_volatility
from store_analytics.weather import summarize_weather

logger = logging.getLogger(__name__)


class StoreReport:
    """
        Store performance report for one date window.

        Attributes:
            records (RecordSet): The full input record set.
            period_from (datetime.date): First business date of the window.
            period_to (datetime.date): Last business date of the window, inclusive.
            thresholds (Thresholds): Effective business-rule thresholds.
            stores (list[StoreRecord]): Stores to report on, in input order.
            shifts (list[ShiftRecord]): Non-deleted shifts whose business date falls in the window,
                ordered by planned start, then id.
            sales_records (list[SalesRecord]): Register readings in the window.
            closeouts (list[SafeCloseoutRecord]): Submitted (non-draft) closeouts in the window.
            rollups (dict): (store_id, date) -> DailyRollup, adjusted sales applied.
            factors (dict): store_id -> scaling factor against the network average.
            summaries (list[StorePeriodSummary]): One summary per store.
        """
    def __init__(self, records: RecordSet, period_from: datetime.date, period_to: datetime.date,
                 thresholds: Thresholds = DEFAULT_THRESHOLDS):
        if period_from > period_to:
            raise ValueError(f"Report window starts after it ends: {period_from} > {period_to}")
        self.records = records
        self.period_from = period_from
        self.period_to = period_to
        self.thresholds = thresholds

        # chronological order drives first-seen tie-breaks and first-start weather
        self.shifts = sorted(
            (shift for shift in records.shifts
             if not shift.is_deleted and self._in_window(business_date(shift.planned_start_at, thresholds.timezone))),
            key=lambda shift: (shift.planned_start_at, shift.id),
        )
        self.sales_records = [record for record in records.sales_records if self._in_window(record.business_date)]
        self.closeouts = [
            closeout for closeout in records.closeouts
            if not closeout.is_draft and self._in_window(closeout.business_date)
        ]
        logger.info(f"Building store report for {period_from} to {period_to}: {len(self.shifts)} shifts, "
                    f"{len(self.sales_records)} sales records, {len(self.closeouts)} closeouts")

        self.rollups = build_rollups(self.shifts, self.sales_records, self.closeouts, thresholds.timezone)
        self.stores = self._resolve_stores()

        self.factors = compute_scaling_factors([
            StoreTotals(store.id, sum_or_none(rollup.sales_cents for rollup in store_rollups(self.rollups, store.id))
                        or 0)
            for store in self.stores
        ])
        apply_store_factors(self.rollups, self.factors)

        self.summaries = [self.summarize_store(store) for store in self.stores]

    def _in_window(self, date: datetime.date) -> bool:
        return in_date_range(date, self.period_from, self.period_to)

    def _resolve_stores(self) -> list:
        """Use the supplied stores; fall back to every store seen in the data, named by id."""
        if self.records.stores:
            return list(self.records.stores)
        seen = []
        for store_id, _ in self.rollups:
            if store_id not in seen:
                seen.append(store_id)
        return [StoreRecord(id=store_id, name=store_id) for store_id in seen]

    def summarize_store(self, store: StoreRecord) -> StorePeriodSummary:
        """
        Compute every metric block for one store.

        Args:
            store (StoreRecord): The store to summarize.

        Returns:
            StorePeriodSummary: The store's metrics; previous_deltas are left all None.
        """
        rollups = store_rollups(self.rollups, store.id)
        shifts = [shift for shift in self.shifts if shift.store_id == store.id]
        sales_records = [record for record in self.sales_records if record.store_id == store.id]
        closeouts = [closeout for closeout in self.closeouts if closeout.store_id == store.id]
        sales_index = SalesIndex(sales_records, self.thresholds.timezone)
        factor = self.factors.get(store.id, 1.0)

        gross_sales = sum_or_none(rollup.sales_cents for rollup in rollups)
        adjusted_gross_sales = sum_or_none(rollup.adjusted_sales_cents for rollup in rollups)
        total_transactions = sum_or_none(rollup.transactions for rollup in rollups)
        transaction_days = [
            rollup for rollup in rollups if rollup.transactions is not None and rollup.sales_cents is not None
        ]
        sales_on_transaction_days = sum_or_none(rollup.sales_cents for rollup in transaction_days)
        adjusted_sales_on_transaction_days = sum_or_none(rollup.adjusted_sales_cents for rollup in transaction_days)
        transactions_with_sales = sum_or_none(rollup.transactions for rollup in transaction_days)
        total_labor_hours = sum(rollup.labor_hours for rollup in rollups if rollup.labor_hours is not None)

        daily_trend = build_daily_trend(rollups, self.thresholds.rolling_window_days)
        day_rows = build_day_of_week_averages(rollups)
        type_rows = build_shift_type_breakdown(shifts, sales_index)
        best_day, worst_day = best_and_worst_day(day_rows)
        weather_days = [rollup.weather for rollup in rollups if rollup.weather is not None]
        daily_sales = {rollup.date: rollup.sales_cents for rollup in rollups if rollup.sales_cents is not None}

        logger.debug(f"Store {store.id}: gross {gross_sales}, factor {factor}, {len(rollups)} days")

        return StorePeriodSummary(
            store_id=store.id,
            store_name=store.name,
            period_from=self.period_from,
            period_to=self.period_to,
            gross_sales_cents=gross_sales,
            adjusted_gross_sales_cents=adjusted_gross_sales,
            store_scaling_factor=round(factor, 4),
            total_transactions=total_transactions,
            avg_basket_size_cents=round_half_up(safe_divide(sales_on_transaction_days, transactions_with_sales)),
            adjusted_avg_basket_size_cents=round_half_up(
                safe_divide(adjusted_sales_on_transaction_days, transactions_with_sales)),
            total_labor_hours=round1(total_labor_hours),
            rplh_cents=round_half_up(safe_divide(gross_sales, total_labor_hours)),
            adjusted_rplh_cents=round_half_up(safe_divide(adjusted_gross_sales, total_labor_hours)),
            cash_mix=summarize_cash_mix(closeouts),
            weather_days=weather_days,
            weather_summary=summarize_weather(weather_days, daily_sales, self.thresholds),
            best_day=best_day,
            worst_day=worst_day,
            best_shift_type=best_shift_type(type_rows),
            daily_trend=daily_trend,
            day_of_week_averages=day_rows,
            shift_type_breakdown=type_rows,
            volatility=compute_volatility(daily_trend, self.thresholds.sigma_band),
            cash_risk=summarize_cash_risk(closeouts),
            data_integrity=summarize_data_integrity(rollups, sales_records, self.period_from, self.period_to),
            top_performers=rank_top_performers(shifts, sales_index, self.records.employees),
        )


def summarize_cash_mix(closeouts) -> CashMix:
    """Cash and card totals and shares from submitted closeouts; None without closeouts."""
    if not closeouts:
        return CashMix()
    cash_sales = sum(closeout.cash_cents for closeout in closeouts)
    card_sales = sum(closeout.card_cents for closeout in closeouts)
    total_payment = cash_sales + card_sales
    return CashMix(
        cash_sales_cents=cash_sales,
        card_sales_cents=card_sales,
        cash_pct=round_half_up(safe_divide(cash_sales * PCT_MULTIPLIER, total_payment)) if total_payment > 0 else None,
        card_pct=round_half_up(safe_divide(card_sales * PCT_MULTIPLIER, total_payment)) if total_payment > 0 else None,
        deposit_variance_cents=sum(closeout.variance_cents for closeout in closeouts),
        safe_closeout_day_count=len(closeouts),
    )


def summarize_cash_risk(closeouts) -> CashRiskSummary:
    """
    Deposit variance statistics per business date.

    Variances of several closeouts on one date are summed first. The largest single-day
    variance is picked by magnitude, the first date winning ties, and keeps its sign.
    """
    variance_by_date = {}
    for closeout in closeouts:
        variance_by_date[closeout.business_date] = variance_by_date.get(closeout.business_date, 0) \
            + closeout.variance_cents
    variances = list(variance_by_date.values())
    if not variances:
        return CashRiskSummary()

    variance_days = sum(1 for variance in variances if variance != 0)
    total_variance = sum(variances)
    largest = variances[0]
    for variance in variances[1:]:
        if abs(variance) > abs(largest):
            largest = variance

    return CashRiskSummary(
        variance_days=variance_days,
        total_variance_cents=total_variance,
        avg_variance_per_day_cents=round_half_up(total_variance / len(variances)),
        largest_single_day_variance_cents=largest,
        variance_rate_pct=round_half_up(variance_days / len(variances) * PCT_MULTIPLIER),
    )


def summarize_data_integrity(rollups, sales_records, period_from: datetime.date,
                             period_to: datetime.date) -> DataIntegritySummary:
    """
    Count gaps in a store's data against the expected calendar.

    Missing transaction and labor days are only counted on days that have sales, so a
    closed day is reported once (as a missing sales day) rather than three times.
    """
    expected_dates = date_range(period_from, period_to)
    by_date = {rollup.date: rollup for rollup in rollups}
    sales_dates = {date for date, rollup in by_date.items() if rollup.sales_cents is not None}

    missing_sales_days = sum(1 for date in expected_dates if date not in sales_dates)
    missing_transaction_days = sum(
        1 for date in expected_dates if date in sales_dates and by_date[date].transactions is None
    )
    missing_labor_days = sum(
        1 for date in expected_dates
        if date in sales_dates and (by_date[date].labor_hours is None or by_date[date].labor_hours <= 0)
    )
    rollover_dates = {
        record.business_date for record in sales_records
        if in_date_range(record.business_date, period_from, period_to) and (
            (record.rollover_in_cents or 0) > 0
            or (record.is_rollover_night and (record.rollover_out_cents or 0) > 0)
        )
    }
    return DataIntegritySummary(
        expected_days=len(expected_dates),
        missing_sales_days=missing_sales_days,
        missing_transaction_days=missing_transaction_days,
        missing_labor_days=missing_labor_days,
        rollover_adjusted_days=len(rollover_dates),
    )


def _delta(current, previous):
    if current is None or previous is None:
        return None
    return current - previous


def compute_previous_deltas(current: StorePeriodSummary,
                            previous: Optional[StorePeriodSummary]) -> StorePreviousDeltas:
    """current - previous for the headline metrics; None wherever either side is None."""
    if previous is None:
        return StorePreviousDeltas()
    return StorePreviousDeltas(
        gross_sales_cents=_delta(current.gross_sales_cents, previous.gross_sales_cents),
        adjusted_gross_sales_cents=_delta(current.adjusted_gross_sales_cents, previous.adjusted_gross_sales_cents),
        total_transactions=_delta(current.total_transactions, previous.total_transactions),
        avg_basket_size_cents=_delta(current.avg_basket_size_cents, previous.avg_basket_size_cents),
        rplh_cents=_delta(current.rplh_cents, previous.rplh_cents),
    )


def analyze_store_data(records: RecordSet, period_from: datetime.date, period_to: datetime.date,
                       previous_from: Optional[datetime.date] = None, cfg: Optional[dict] = None,
                       store_id: Optional[str] = None) -> list:
    """
    Build store summaries for a window, optionally diffed against a prior window.

    The prior window runs from previous_from up to the day before period_from. Both
    windows are computed independently, each with its own scaling factors.

    Args:
        records (RecordSet): All input records.
        period_from (datetime.date): First business date of the window.
        period_to (datetime.date): Last business date of the window, inclusive.
        previous_from (datetime.date, optional): Start of the comparison window.
        cfg (dict, optional): Parsed YAML config with 'setup' and 'thresholds' overrides.
        store_id (str, optional): Restrict the output to one store. Normalization still
            uses every store.

    Returns:
        list[StorePeriodSummary]: One summary per store, in store input order.

    Raises:
        ValueError: If a window is empty or inverted.
    """
    thresholds = Thresholds.from_config(cfg)
    current = StoreReport(records, period_from, period_to, thresholds)

    previous_by_store = {}
    if previous_from is not None:
        if previous_from >= period_from:
            raise ValueError(f"previous_from {previous_from} must be before period_from {period_from}")
        previous = StoreReport(records, previous_from, period_from - datetime.timedelta(days=1), thresholds)
        previous_by_store = {summary.store_id: summary for summary in previous.summaries}

    summaries = []
    for summary in current.summaries:
        if store_id is not None and summary.store_id != store_id:
            continue
        summary.previous_deltas = compute_previous_deltas(summary, previous_by_store.get(summary.store_id))
        summaries.append(summary)
    return summaries
