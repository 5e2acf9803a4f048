"""
Value objects produced by the engine.

These carry no behaviour; the reporting API serializes them with
controller_utility.Encoder. Monetary values are integer cents, and every metric that
could not be computed is None rather than 0.
"""
import datetime
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class WeatherDay:
    date: datetime.date
    start_condition: Optional[str] = None
    start_desc: Optional[str] = None
    start_temp_f: Optional[float] = None
    end_condition: Optional[str] = None
    end_desc: Optional[str] = None
    end_temp_f: Optional[float] = None


@dataclass
class DailyRollup:
    store_id: str
    date: datetime.date
    sales_cents: Optional[int] = None
    adjusted_sales_cents: Optional[int] = None
    sales_source: Optional[str] = None
    transactions: Optional[int] = None
    labor_hours: Optional[float] = None
    shift_count: int = 0
    weather: Optional[WeatherDay] = None


@dataclass
class DailyTrendPoint:
    date: datetime.date
    sales_cents: Optional[int]
    adjusted_sales_cents: Optional[int]
    rolling7_sales_cents: Optional[int]
    adjusted_rolling7_sales_cents: Optional[int]
    labor_hours: Optional[float]
    rplh_cents: Optional[int]
    adjusted_rplh_cents: Optional[int]
    transactions: Optional[int]
    basket_size_cents: Optional[int]
    adjusted_basket_size_cents: Optional[int]


@dataclass
class VolatilitySummary:
    std_dev_daily_sales_cents: Optional[int] = None
    coefficient_of_variation_pct: Optional[float] = None
    below_one_sigma_days: int = 0
    above_one_sigma_days: int = 0
    largest_up_swing_cents: Optional[int] = None
    largest_down_swing_cents: Optional[int] = None


@dataclass
class DayOfWeekAveragesRow:
    day: str
    avg_sales_cents: Optional[int] = None
    avg_transactions: Optional[float] = None
    avg_basket_size_cents: Optional[int] = None
    avg_labor_hours: Optional[float] = None
    avg_rplh_cents: Optional[int] = None
    sample_days: int = 0


@dataclass
class ShiftTypeBreakdownRow:
    shift_type: str
    avg_sales_cents: Optional[int] = None
    avg_transactions: Optional[float] = None
    avg_basket_cents: Optional[int] = None
    avg_rplh_cents: Optional[int] = None
    sample_size: int = 0


@dataclass
class VelocityEntry:
    label: str
    avg_sales_cents: int
    avg_transactions: Optional[float]
    sample_count: int


@dataclass
class PerformerMetric:
    employee_id: str
    employee_name: str
    value: float
    shifts: int


@dataclass
class VolumeLeaders:
    total_sales: Optional[PerformerMetric] = None
    total_transactions: Optional[PerformerMetric] = None
    total_labor_hours: Optional[PerformerMetric] = None


@dataclass
class EfficiencyLeaders:
    rplh: Optional[PerformerMetric] = None
    transactions_per_labor_hour: Optional[PerformerMetric] = None
    basket_size: Optional[PerformerMetric] = None


@dataclass
class TopPerformers:
    volume: VolumeLeaders = field(default_factory=VolumeLeaders)
    efficiency: EfficiencyLeaders = field(default_factory=EfficiencyLeaders)


@dataclass
class WeatherConditionMixEntry:
    condition: str
    count: int
    pct: int


@dataclass
class WeatherSummary:
    dominant_condition: Optional[str] = None
    trend: Optional[str] = None
    condition_mix: List[WeatherConditionMixEntry] = field(default_factory=list)
    temp_min_f: Optional[float] = None
    temp_avg_f: Optional[float] = None
    temp_max_f: Optional[float] = None
    bad_weather_days: int = 0
    outlier_flags: List[str] = field(default_factory=list)
    weather_impact_hint: Optional[str] = None


@dataclass
class CashMix:
    cash_sales_cents: Optional[int] = None
    card_sales_cents: Optional[int] = None
    cash_pct: Optional[int] = None
    card_pct: Optional[int] = None
    deposit_variance_cents: Optional[int] = None
    safe_closeout_day_count: int = 0


@dataclass
class CashRiskSummary:
    variance_days: int = 0
    total_variance_cents: Optional[int] = None
    avg_variance_per_day_cents: Optional[int] = None
    largest_single_day_variance_cents: Optional[int] = None
    variance_rate_pct: Optional[int] = None


@dataclass
class DataIntegritySummary:
    expected_days: int = 0
    missing_sales_days: int = 0
    missing_transaction_days: int = 0
    missing_labor_days: int = 0
    rollover_adjusted_days: int = 0


@dataclass
class StorePreviousDeltas:
    gross_sales_cents: Optional[int] = None
    adjusted_gross_sales_cents: Optional[int] = None
    total_transactions: Optional[int] = None
    avg_basket_size_cents: Optional[int] = None
    rplh_cents: Optional[int] = None


@dataclass
class StorePeriodSummary:
    store_id: str
    store_name: str
    period_from: datetime.date
    period_to: datetime.date

    gross_sales_cents: Optional[int] = None
    adjusted_gross_sales_cents: Optional[int] = None
    store_scaling_factor: float = 1.0
    total_transactions: Optional[int] = None
    avg_basket_size_cents: Optional[int] = None
    adjusted_avg_basket_size_cents: Optional[int] = None
    total_labor_hours: float = 0.0
    rplh_cents: Optional[int] = None
    adjusted_rplh_cents: Optional[int] = None

    cash_mix: CashMix = field(default_factory=CashMix)

    weather_days: List[WeatherDay] = field(default_factory=list)
    weather_summary: WeatherSummary = field(default_factory=WeatherSummary)

    best_day: Optional[VelocityEntry] = None
    worst_day: Optional[VelocityEntry] = None
    best_shift_type: Optional[VelocityEntry] = None

    daily_trend: List[DailyTrendPoint] = field(default_factory=list)
    day_of_week_averages: List[DayOfWeekAveragesRow] = field(default_factory=list)
    shift_type_breakdown: List[ShiftTypeBreakdownRow] = field(default_factory=list)
    volatility: VolatilitySummary = field(default_factory=VolatilitySummary)
    cash_risk: CashRiskSummary = field(default_factory=CashRiskSummary)
    data_integrity: DataIntegritySummary = field(default_factory=DataIntegritySummary)
    top_performers: TopPerformers = field(default_factory=TopPerformers)
    previous_deltas: StorePreviousDeltas = field(default_factory=StorePreviousDeltas)
