import datetime
import math
from typing import Iterable, Optional

from dateutil import parser as date_parser
from dateutil import tz

from store_analytics.constants import DAY_NAMES, DEFAULT_TIMEZONE, SECONDS_PER_HOUR


def round_half_up(value: Optional[float]) -> Optional[int]:
    """
    Round to the nearest integer with halves rounded towards positive infinity.

    Cents are reported as integers; Python's built-in round() uses banker's rounding,
    which would make 2.5 and 3.5 land on the same even value.

    Args:
        value (float): The value to round, or None.

    Returns:
        int: The rounded value, or None when value is None.
    """
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def round1(value: Optional[float]) -> Optional[float]:
    """Round half up to one decimal place, passing None through."""
    if value is None:
        return None
    return math.floor(value * 10 + 0.5) / 10


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """
    Divide two nullable numbers.

    Returns None instead of raising or producing NaN when either side is absent or the
    denominator is zero, so "no data" never turns into 0.

    Args:
        numerator (float): The dividend, or None.
        denominator (float): The divisor, or None.

    Returns:
        float: numerator / denominator, or None.
    """
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def sum_or_none(values: Iterable[Optional[float]]):
    """Sum the present values; None when nothing was present."""
    total = None
    for value in values:
        if value is None:
            continue
        total = value if total is None else total + value
    return total


def parse_timestamp(value) -> Optional[datetime.datetime]:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    - None / "" -> None
    - naive timestamps are interpreted as UTC
    - datetime instances are passed through (made aware if naive)

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        parsed = date_parser.isoparse(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def parse_business_date(value) -> datetime.date:
    """
    Parse a YYYY-MM-DD business date.

    Raises:
        ValueError: If the value is not a valid date.
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value).strip()[:10])


def business_date(timestamp: datetime.datetime, timezone_name: str = DEFAULT_TIMEZONE) -> datetime.date:
    """
    Derive the store-local civil date of a timestamp.

    This is the single place a timestamp becomes a business date. Everything downstream
    (rollups, weekday buckets, window filters) works on the resulting date object, so a
    date is never re-derived through a second timezone path.

    Args:
        timestamp (datetime.datetime): An aware timestamp.
        timezone_name (str): IANA timezone of the store, e.g. 'America/Chicago'.

    Returns:
        datetime.date: The local calendar date.

    Raises:
        ValueError: If the timezone name is unknown.
    """
    zone = tz.gettz(timezone_name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {timezone_name}")
    return timestamp.astimezone(zone).date()


def day_name(date: datetime.date) -> str:
    # date.weekday() is Monday=0; DAY_NAMES starts on Sunday
    return DAY_NAMES[(date.weekday() + 1) % 7]


def date_range(start: datetime.date, end: datetime.date) -> list:
    """
    Build the inclusive list of calendar dates between start and end.

    Args:
        start (datetime.date): First date.
        end (datetime.date): Last date, inclusive.

    Returns:
        list: Every date from start to end; empty if end precedes start.
    """
    dates = []
    cursor = start
    while cursor <= end:
        dates.append(cursor)
        cursor += datetime.timedelta(days=1)
    return dates


def in_date_range(date: datetime.date, start: datetime.date, end: datetime.date) -> bool:
    return start <= date <= end


def shift_hours(planned_start_at: datetime.datetime, ended_at: Optional[datetime.datetime]) -> float:
    """
    Labor hours for one shift, measured from the planned start to the recorded end.

    Open (unfinished) shifts contribute zero hours, and a shift that ended before its
    planned start never goes negative.
    """
    if ended_at is None:
        return 0.0
    return max(0.0, (ended_at - planned_start_at).total_seconds() / SECONDS_PER_HOUR)


def most_frequent(items: list) -> Optional[str]:
    """
    Statistical mode of a list, first-seen value winning ties.

    Relies on dict insertion order, so the result is deterministic for a given input order.
    """
    if not items:
        return None
    frequency = {}
    for item in items:
        frequency[item] = frequency.get(item, 0) + 1
    best = None
    best_count = 0
    for value, count in frequency.items():
        if count > best_count:
            best = value
            best_count = count
    return best
