# SPDX-License-Identifier: Apache-2.0
"""
Named constants for the store performance analytics engine.

These constants replace magic numbers throughout the codebase so the business
rules of the store report (weather outliers, sigma bands, rolling windows) are
self-documenting and can be overridden through the YAML config.
"""

# ---------------------------------------------------------------------------
# Business dates
# ---------------------------------------------------------------------------
DEFAULT_TIMEZONE = "America/Chicago"
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# ---------------------------------------------------------------------------
# Shift kinds
# ---------------------------------------------------------------------------
SHIFT_OPEN = "open"
SHIFT_CLOSE = "close"
SHIFT_DOUBLE = "double"
SHIFT_OTHER = "other"
SHIFT_KINDS = (SHIFT_OPEN, SHIFT_CLOSE, SHIFT_DOUBLE, SHIFT_OTHER)

# ---------------------------------------------------------------------------
# Sales sources for a store-day
# ---------------------------------------------------------------------------
SOURCE_REGISTER = "register"
SOURCE_CLOSEOUT = "closeout"

CLOSEOUT_STATUS_DRAFT = "draft"

# ---------------------------------------------------------------------------
# Trend & volatility
# ---------------------------------------------------------------------------
ROLLING_WINDOW_DAYS = 7  # current day + 6 preceding present days
SIGMA_BAND = 1.0  # days outside mean +/- SIGMA_BAND * stddev are counted

# ---------------------------------------------------------------------------
# Weather correlation
# ---------------------------------------------------------------------------
BAD_WEATHER_KEYWORDS = (
    "rain",
    "drizzle",
    "thunder",
    "storm",
    "snow",
    "sleet",
    "hail",
    "freezing",
    "mist",
    "fog",
    "squall",
)
BAD_WEATHER_DAY_THRESHOLD = 3
TEMPERATURE_RANGE_THRESHOLD_F = 25
INTRADAY_SWING_THRESHOLD_F = 18
INTRADAY_SWING_DAY_THRESHOLD = 2
LOW_SALES_RATIO = 0.85  # a day is "low" below 85% of the window's mean daily sales
VOLATILE_CONDITION_COUNT = 3  # distinct conditions needed to call the window "Volatile"

WEATHER_TREND_STABLE = "Stable"
WEATHER_TREND_VOLATILE = "Volatile"

# ---------------------------------------------------------------------------
# Scaling
# ---------------------------------------------------------------------------
PCT_MULTIPLIER = 100
SECONDS_PER_HOUR = 3600
UNKNOWN_EMPLOYEE_NAME = "Unknown"
