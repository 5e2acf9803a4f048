import datetime
import logging

from dateutil import tz

from store_analytics.config import Thresholds

logger = logging.getLogger(__name__)
business_date_format = '%Y-%m-%d'

_INTEGER_THRESHOLDS = ('rolling_window_days', 'bad_weather_day_threshold', 'intraday_swing_day_threshold',
                       'volatile_condition_count')
_NUMBER_THRESHOLDS = ('sigma_band', 'temperature_range_threshold_f', 'intraday_swing_threshold_f',
                      'low_sales_ratio')


def parse_window_date(value, name: str) -> datetime.date:
    """
    Parse a YYYY-MM-DD window bound.

    Raises:
        ValueError: If the value is missing or not in the expected format.
    """
    if value is None or value == '':
        raise ValueError(f"Missing required date parameter '{name}', expected format: 2024-03-31")
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.datetime.strptime(str(value), business_date_format).date()
    except ValueError:
        raise ValueError(f"{name} is in an invalid format, example of correct format: 2024-03-31, got: {value}")


class ReportValidator:
    def __init__(self, cfg: dict = None):
        """
        Initializes the ReportValidator that validates the yaml config and the report window

        Args:
            cfg (dict, optional): The parsed store report YAML configuration.
        """
        self.cfg = cfg or {}

    def validate_yaml(self):
        self.check_sections()
        self.check_timezone()
        self.validate_thresholds()

    def check_sections(self):
        """
        Checks the top-level config sections.

        Raises:
            KeyError: If a section other than 'setup' and 'thresholds' is present, or a section is not a mapping.
        """
        for section, body in self.cfg.items():
            if section == '__line__':
                continue
            if section not in ('setup', 'thresholds'):
                raise KeyError(f"Unknown config section '{section}' at line: {self.cfg.get('__line__')}")
            if body is not None and not isinstance(body, dict):
                raise KeyError(f"Config section '{section}' must be a mapping at line: {self.cfg.get('__line__')}")

    def check_timezone(self):
        """
        Checks the timezone in the 'setup' section.

        Raises:
            ValueError: If the timezone is not a known IANA zone.
        """
        setup = self.cfg.get('setup') or {}
        if 'timezone' not in setup:
            return
        if tz.gettz(str(setup['timezone'])) is None:
            raise ValueError(f"Unknown timezone {setup['timezone']}, example of a valid value: America/Chicago, "
                             f"at line: {setup.get('__line__')}")

    def validate_thresholds(self):
        """
        Validates the types and ranges of the threshold overrides.

        Raises:
            KeyError: If an unknown threshold is configured.
            ValueError: If a threshold has the wrong type or is out of range.
        """
        known = set(Thresholds.__dataclass_fields__) | {'data_path'}
        for section in ('setup', 'thresholds'):
            body = self.cfg.get(section) or {}
            line = body.get('__line__')
            for key, value in body.items():
                if key == '__line__':
                    continue
                if key not in known:
                    raise KeyError(f"Unknown {section} parameter {key} at line: {line}")
                if key in _INTEGER_THRESHOLDS and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
                    raise ValueError(f"{key} must be a positive integer, got {value} at line: {line}")
                if key in _NUMBER_THRESHOLDS and (isinstance(value, bool) or not isinstance(value, (int, float))
                                                  or value < 0):
                    raise ValueError(f"{key} must be a non-negative number, got {value} at line: {line}")
                if key == 'bad_weather_keywords' and (
                        not isinstance(value, list) or not all(isinstance(keyword, str) for keyword in value)):
                    raise ValueError(f"bad_weather_keywords must be a list of strings at line: {line}")

    @staticmethod
    def validate_window(period_from, period_to, previous_from=None):
        """
        Parses and checks the report window.

        Args:
            period_from: First business date, a date or a YYYY-MM-DD string.
            period_to: Last business date, inclusive.
            previous_from (optional): Start of the comparison window.

        Returns:
            tuple: (period_from, period_to, previous_from) as dates, previous_from may be None.

        Raises:
            ValueError: If a bound is missing or malformed, the window is inverted, or the
                comparison window does not end before the current one starts.
        """
        start = parse_window_date(period_from, 'from')
        end = parse_window_date(period_to, 'to')
        if start > end:
            raise ValueError(f"from ({start}) must not be after to ({end})")
        previous_start = None
        if previous_from not in (None, ''):
            previous_start = parse_window_date(previous_from, 'previousFrom')
            if previous_start >= start:
                raise ValueError(f"previousFrom ({previous_start}) must be before from ({start})")
        logger.debug(f"Validated report window {start} to {end}, previous from {previous_start}")
        return start, end, previous_start
