"""
Employee performance ranking.

Six independent top-1 selections over per-employee rollups of ended shifts. Each metric
is chosen with a single linear scan where strictly-greater wins, so ties keep the
employee seen first.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from store_analytics.analytics_utility import round1, round_half_up, safe_divide, shift_hours
from store_analytics.constants import UNKNOWN_EMPLOYEE_NAME
from store_analytics.summary import EfficiencyLeaders, PerformerMetric, TopPerformers, VolumeLeaders

logger = logging.getLogger(__name__)


@dataclass
class EmployeeRollup:
    employee_id: str
    employee_name: str
    shifts: int = 0
    total_sales_cents: int = 0
    total_sales_with_txn_cents: int = 0
    total_transactions: int = 0
    total_labor_hours: float = 0.0


def _positive(value) -> Optional[float]:
    return value if value is not None and value > 0 else None


def pick_top_metric(entries, value_selector: Callable, rounder: Callable = lambda value: value):
    """
    Select the single best employee for one metric.

    Args:
        entries (list[EmployeeRollup]): Candidates in first-appearance order.
        value_selector (Callable): Returns the metric for an entry, or None to skip it.
        rounder (Callable): Applied to the winning value for display.

    Returns:
        PerformerMetric: The winner, or None when no entry produced a value.
    """
    winner = None
    winner_value = None
    for entry in entries:
        value = value_selector(entry)
        if value is None:
            continue
        if winner is None or value > winner_value:
            winner = entry
            winner_value = value
    if winner is None:
        return None
    return PerformerMetric(
        employee_id=winner.employee_id,
        employee_name=winner.employee_name,
        value=rounder(winner_value),
        shifts=winner.shifts,
    )


def build_employee_rollups(shifts, sales_index, employee_names: dict) -> list:
    """
    Accumulate sales, transactions and labor per employee over ended shifts.

    A shift's sales count towards the basket numerator only when the shift also carries
    a transaction count.
    """
    rollups = {}
    for shift in shifts:
        if shift.ended_at is None:
            continue
        sales = sales_index.shift_sales(shift)
        transactions = sales_index.shift_transactions(shift)

        if shift.employee_id not in rollups:
            rollups[shift.employee_id] = EmployeeRollup(
                employee_id=shift.employee_id,
                employee_name=employee_names.get(shift.employee_id) or UNKNOWN_EMPLOYEE_NAME,
            )
        current = rollups[shift.employee_id]
        current.shifts += 1
        if sales is not None:
            current.total_sales_cents += sales
        if transactions is not None:
            if sales is not None:
                current.total_sales_with_txn_cents += sales
            current.total_transactions += transactions
        current.total_labor_hours += shift_hours(shift.planned_start_at, shift.ended_at)
    return list(rollups.values())


def rank_top_performers(shifts, sales_index, employees=()) -> TopPerformers:
    """
    Rank one store's employees on volume and efficiency.

    Args:
        shifts (list[ShiftRecord]): The store's active shifts in the window.
        sales_index (SalesIndex): The store's register readings.
        employees (list[EmployeeRecord]): Name lookup; unknown or blank names show as "Unknown".

    Returns:
        TopPerformers: Volume and efficiency leaders, None where no employee qualifies.
    """
    employee_names = {employee.id: employee.name for employee in employees}
    entries = build_employee_rollups(shifts, sales_index, employee_names)
    logger.debug(f"Ranking {len(entries)} employees")

    def rplh(entry):
        if entry.total_sales_cents > 0 and entry.total_labor_hours > 0:
            return entry.total_sales_cents / entry.total_labor_hours
        return None

    def transactions_per_labor_hour(entry):
        if entry.total_transactions > 0 and entry.total_labor_hours > 0:
            return entry.total_transactions / entry.total_labor_hours
        return None

    def basket_size(entry):
        return _positive(safe_divide(_positive(entry.total_sales_with_txn_cents), entry.total_transactions))

    return TopPerformers(
        volume=VolumeLeaders(
            total_sales=pick_top_metric(entries, lambda entry: _positive(entry.total_sales_cents)),
            total_transactions=pick_top_metric(entries, lambda entry: _positive(entry.total_transactions)),
            total_labor_hours=pick_top_metric(entries, lambda entry: _positive(entry.total_labor_hours),
                                              lambda value: round(value, 2)),
        ),
        efficiency=EfficiencyLeaders(
            rplh=pick_top_metric(entries, rplh, round_half_up),
            transactions_per_labor_hour=pick_top_metric(entries, transactions_per_labor_hour, round1),
            basket_size=pick_top_metric(entries, basket_size, round_half_up),
        ),
    )
