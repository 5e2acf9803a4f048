"""
Sales reconstruction from register readings.

A store-day can carry an opening X report, closing sales, a Z report and rollover
carries, any of which may be missing. These functions apply a fixed source priority to
turn whatever is present into a single figure, or None when nothing usable exists.
"""
from typing import Optional

from store_analytics.analytics_utility import business_date
from store_analytics.constants import DEFAULT_TIMEZONE, SHIFT_CLOSE, SHIFT_DOUBLE, SHIFT_OPEN
from store_analytics.records import SalesRecord, ShiftRecord


def _carry_in(record: SalesRecord) -> int:
    return record.rollover_in_cents or 0


def _carry_out(record: SalesRecord) -> int:
    # the closer's carry only counts on nights flagged as rollover nights
    if record.is_rollover_night and record.rollover_out_cents is not None:
        return record.rollover_out_cents
    return 0


def reconstruct_day_sales(record: Optional[SalesRecord]) -> Optional[int]:
    """
    Reconstruct the gross sales of one store-day.

    Priority:
        1. AM (opening X minus carry-in) plus PM (closing sales), plus carry-out.
        2. AM missing but Z present: Z minus carry-in, plus carry-out.
        3. Whichever single figure (PM or AM) is present, plus carry-out.
        4. Nothing present: None.

    The Z fallback fires only when the AM figure is missing, not when it is zero.

    Args:
        record (SalesRecord): The day's register readings.

    Returns:
        int: Gross sales in cents, or None when the day has no sales data.
    """
    if record is None:
        return None
    carry_in = _carry_in(record)
    carry_out = _carry_out(record)
    pm_sales = record.close_sales_cents
    am_sales = record.open_x_cents - carry_in if record.open_x_cents is not None else None

    if am_sales is not None and pm_sales is not None:
        return am_sales + pm_sales + carry_out
    if am_sales is None and record.z_report_cents is not None:
        return record.z_report_cents - carry_in + carry_out
    if pm_sales is not None:
        return pm_sales + carry_out
    if am_sales is not None:
        return am_sales + carry_out
    return None


def reconstruct_shift_sales(shift_kind: str, record: Optional[SalesRecord]) -> Optional[int]:
    """
    Reconstruct the sales attributable to one shift of the given kind.

    'open' shifts own the AM figure. 'close' and 'double' shifts own the PM figure,
    falling back to Z minus the opening X when closing sales were not keyed, and add the
    carry-out on rollover nights. 'other' shifts own no register reading.

    Args:
        shift_kind (str): One of open, close, double, other.
        record (SalesRecord): The register readings matched to the shift.

    Returns:
        int: Sales in cents, or None.
    """
    if record is None:
        return None
    if shift_kind == SHIFT_OPEN:
        return record.open_x_cents - _carry_in(record) if record.open_x_cents is not None else None
    if shift_kind in (SHIFT_CLOSE, SHIFT_DOUBLE):
        base_close = record.close_sales_cents
        if base_close is None and record.z_report_cents is not None and record.open_x_cents is not None:
            base_close = record.z_report_cents - record.open_x_cents
        return base_close + _carry_out(record) if base_close is not None else None
    return None


def day_transactions(record: Optional[SalesRecord]) -> Optional[int]:
    """Open plus close transaction counts; a zero total means "not entered", i.e. None."""
    if record is None:
        return None
    total = (record.open_txn_count or 0) + (record.close_txn_count or 0)
    return total if total > 0 else None


def shift_transactions(shift_kind: str, record: Optional[SalesRecord]) -> Optional[int]:
    if record is None:
        return None
    if shift_kind == SHIFT_OPEN:
        count = record.open_txn_count
        return count if count is not None and count > 0 else None
    if shift_kind == SHIFT_CLOSE:
        count = record.close_txn_count
        return count if count is not None and count > 0 else None
    if shift_kind == SHIFT_DOUBLE:
        return day_transactions(record)
    return None


class SalesIndex:
    """
    Lookup of one store's sales records by open shift id, close shift id and date.

    A shift is matched to the record naming it as the open shift, then as the close
    shift, then to the record for its business date.
    """

    def __init__(self, sales_records, timezone: str = DEFAULT_TIMEZONE):
        self.timezone = timezone
        self.by_open_shift = {}
        self.by_close_shift = {}
        self.by_date = {}
        for record in sales_records:
            if record.open_shift_id:
                self.by_open_shift[record.open_shift_id] = record
            if record.close_shift_id:
                self.by_close_shift[record.close_shift_id] = record
            self.by_date[record.business_date] = record

    def record_for_shift(self, shift: ShiftRecord) -> Optional[SalesRecord]:
        record = self.by_open_shift.get(shift.id) or self.by_close_shift.get(shift.id)
        if record is not None:
            return record
        return self.by_date.get(business_date(shift.planned_start_at, self.timezone))

    def shift_sales(self, shift: ShiftRecord) -> Optional[int]:
        return reconstruct_shift_sales(shift.shift_kind, self.record_for_shift(shift))

    def shift_transactions(self, shift: ShiftRecord) -> Optional[int]:
        return shift_transactions(shift.shift_kind, self.record_for_shift(shift))
