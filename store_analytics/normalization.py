"""
Cross-store sales normalization.

Each store is scaled to the network's average store volume so employees and days at a
small store can be compared with those at a busy one:

    factor(s) = network_avg / total(s)

Adjusted figures are a comparison aid only and never feed financial totals.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from store_analytics.analytics_utility import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreTotals:
    store_id: str
    total_sales_cents: int


def compute_scaling_factors(store_totals) -> dict:
    """
    Compute a scaling factor for every store.

    The network average is the arithmetic mean of the strictly positive store totals.
    Stores with no measured sales get a factor of exactly 1.0 and do not pull the
    average down for everyone else.

    Args:
        store_totals (list[StoreTotals]): Total reconstructed sales per store for the window.

    Returns:
        dict: store_id -> factor, in the order the stores were given.
    """
    positive_totals = [totals.total_sales_cents for totals in store_totals if totals.total_sales_cents > 0]
    network_avg = sum(positive_totals) / len(positive_totals) if positive_totals else 0

    factors = {}
    for totals in store_totals:
        if totals.total_sales_cents > 0 and network_avg > 0:
            factors[totals.store_id] = network_avg / totals.total_sales_cents
        else:
            factors[totals.store_id] = 1.0

    logger.debug(f"Scaling factors computed against network average {network_avg}: {factors}")
    return factors


def apply_scaling_factor(raw_cents: Optional[int], factor: float) -> Optional[int]:
    """Scale a cents value, rounding half up; absent values stay absent."""
    if raw_cents is None:
        return None
    return round_half_up(raw_cents * factor)
