import logging
from dataclasses import dataclass, fields
from typing import Optional

from store_analytics import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thresholds:
    """
    Tunable business rules of the store report.

    Attributes:
        timezone (str): IANA timezone used to turn shift timestamps into business dates.
        rolling_window_days (int): Size of the trailing sales average, current day included.
        sigma_band (float): Multiple of the standard deviation used for below/above counts.
        bad_weather_keywords (tuple): Substrings that mark a condition as bad weather.
        bad_weather_day_threshold (int): Bad-weather days needed to raise an outlier flag.
        temperature_range_threshold_f (float): Window temperature range that raises a flag.
        intraday_swing_threshold_f (float): Start-to-end swing that makes a day a "swing day".
        intraday_swing_day_threshold (int): Swing days needed to raise a flag.
        low_sales_ratio (float): Fraction of mean daily sales below which a day is "low".
        volatile_condition_count (int): Distinct conditions for a "Volatile" weather trend.
    """
    timezone: str = constants.DEFAULT_TIMEZONE
    rolling_window_days: int = constants.ROLLING_WINDOW_DAYS
    sigma_band: float = constants.SIGMA_BAND
    bad_weather_keywords: tuple = constants.BAD_WEATHER_KEYWORDS
    bad_weather_day_threshold: int = constants.BAD_WEATHER_DAY_THRESHOLD
    temperature_range_threshold_f: float = constants.TEMPERATURE_RANGE_THRESHOLD_F
    intraday_swing_threshold_f: float = constants.INTRADAY_SWING_THRESHOLD_F
    intraday_swing_day_threshold: int = constants.INTRADAY_SWING_DAY_THRESHOLD
    low_sales_ratio: float = constants.LOW_SALES_RATIO
    volatile_condition_count: int = constants.VOLATILE_CONDITION_COUNT

    @classmethod
    def from_config(cls, cfg: Optional[dict]) -> "Thresholds":
        """
        Merge the 'setup' and 'thresholds' sections of a report config over the defaults.

        Unknown keys are ignored (they are reported by ReportValidator), and the
        '__line__' markers added by SafeLineLoader are skipped.

        Args:
            cfg (dict): The parsed YAML config, or None for all defaults.

        Returns:
            Thresholds: The effective thresholds.
        """
        if not cfg:
            return cls()

        known = {f.name for f in fields(cls)}
        overrides = {}
        for section in ('setup', 'thresholds'):
            for key, value in (cfg.get(section) or {}).items():
                if key == '__line__' or key not in known:
                    continue
                overrides[key] = value

        if 'bad_weather_keywords' in overrides:
            overrides['bad_weather_keywords'] = tuple(
                str(keyword).strip().lower() for keyword in overrides['bad_weather_keywords']
            )

        if overrides:
            logger.info(f"Applying threshold overrides: {sorted(overrides)}")
        return cls(**overrides)


DEFAULT_THRESHOLDS = Thresholds()
