"""
Input records supplied by the data-access layer.

Every optional field is modelled as Optional and left as None when the source row
omits it; nothing here defaults an absent reading to zero.
"""
import datetime
from dataclasses import dataclass
from typing import Optional

from store_analytics.analytics_utility import parse_business_date, parse_timestamp
from store_analytics.constants import CLOSEOUT_STATUS_DRAFT, SHIFT_KINDS


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _optional_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y", "t")
    return bool(value)


@dataclass(frozen=True)
class WeatherObservation:
    condition: Optional[str] = None
    description: Optional[str] = None
    temp_f: Optional[float] = None

    @classmethod
    def from_dict(cls, row: Optional[dict]) -> Optional["WeatherObservation"]:
        if not row:
            return None
        observation = cls(
            condition=_optional_str(row.get("condition")),
            description=_optional_str(row.get("desc", row.get("description"))),
            temp_f=_optional_float(row.get("tempF", row.get("temp_f"))),
        )
        if observation.condition is None and observation.description is None and observation.temp_f is None:
            return None
        return observation


@dataclass(frozen=True)
class ShiftRecord:
    id: str
    store_id: str
    employee_id: str
    shift_kind: str
    planned_start_at: datetime.datetime
    ended_at: Optional[datetime.datetime] = None
    is_deleted: bool = False
    start_weather: Optional[WeatherObservation] = None
    end_weather: Optional[WeatherObservation] = None

    @classmethod
    def from_dict(cls, row: dict) -> "ShiftRecord":
        """
        Build a shift from a data-access row.

        Weather may be supplied nested ({"startWeather": {"condition": ...}}) or flat
        (startWeatherCondition, startWeatherDesc, startTempF), as it arrives from CSV.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the shift kind is unknown or a timestamp is malformed.
        """
        shift_kind = str(row["shiftKind"]).strip().lower()
        if shift_kind not in SHIFT_KINDS:
            raise ValueError(f"Unknown shift kind '{row['shiftKind']}' for shift {row.get('id')}")
        planned_start_at = parse_timestamp(row["plannedStartAt"])
        if planned_start_at is None:
            raise ValueError(f"Shift {row.get('id')} has no plannedStartAt")
        return cls(
            id=str(row["id"]),
            store_id=str(row["storeId"]),
            employee_id=str(row["employeeId"]),
            shift_kind=shift_kind,
            planned_start_at=planned_start_at,
            ended_at=parse_timestamp(row.get("endedAt")),
            is_deleted=_flag(row.get("isDeleted", False)),
            start_weather=_weather_from_row(row, "start"),
            end_weather=_weather_from_row(row, "end"),
        )


def _weather_from_row(row: dict, prefix: str) -> Optional[WeatherObservation]:
    nested = row.get(f"{prefix}Weather")
    if isinstance(nested, dict):
        return WeatherObservation.from_dict(nested)
    return WeatherObservation.from_dict({
        "condition": row.get(f"{prefix}WeatherCondition"),
        "desc": row.get(f"{prefix}WeatherDesc"),
        "tempF": row.get(f"{prefix}TempF"),
    })


@dataclass(frozen=True)
class SalesRecord:
    store_id: str
    business_date: datetime.date
    open_shift_id: Optional[str] = None
    close_shift_id: Optional[str] = None
    open_x_cents: Optional[int] = None
    close_sales_cents: Optional[int] = None
    z_report_cents: Optional[int] = None
    rollover_in_cents: Optional[int] = None
    rollover_out_cents: Optional[int] = None
    is_rollover_night: bool = False
    open_txn_count: Optional[int] = None
    close_txn_count: Optional[int] = None

    @classmethod
    def from_dict(cls, row: dict) -> "SalesRecord":
        return cls(
            store_id=str(row["storeId"]),
            business_date=parse_business_date(row["businessDate"]),
            open_shift_id=_optional_str(row.get("openShiftId")),
            close_shift_id=_optional_str(row.get("closeShiftId")),
            open_x_cents=_optional_int(row.get("openXCents")),
            close_sales_cents=_optional_int(row.get("closeSalesCents")),
            z_report_cents=_optional_int(row.get("zReportCents")),
            rollover_in_cents=_optional_int(row.get("rolloverInCents")),
            rollover_out_cents=_optional_int(row.get("rolloverOutCents")),
            is_rollover_night=_flag(row.get("isRolloverNight", False)),
            open_txn_count=_optional_int(row.get("openTxnCount")),
            close_txn_count=_optional_int(row.get("closeTxnCount")),
        )


@dataclass(frozen=True)
class SafeCloseoutRecord:
    store_id: str
    business_date: datetime.date
    status: str
    cash_cents: int = 0
    card_cents: int = 0
    expected_deposit_cents: int = 0
    actual_deposit_cents: int = 0
    variance_cents: int = 0

    @property
    def is_draft(self) -> bool:
        return self.status == CLOSEOUT_STATUS_DRAFT

    @classmethod
    def from_dict(cls, row: dict) -> "SafeCloseoutRecord":
        return cls(
            store_id=str(row["storeId"]),
            business_date=parse_business_date(row["businessDate"]),
            status=str(row.get("status") or "").strip().lower(),
            cash_cents=_optional_int(row.get("cashCents")) or 0,
            card_cents=_optional_int(row.get("cardCents")) or 0,
            expected_deposit_cents=_optional_int(row.get("expectedDepositCents")) or 0,
            actual_deposit_cents=_optional_int(row.get("actualDepositCents")) or 0,
            variance_cents=_optional_int(row.get("varianceCents")) or 0,
        )


@dataclass(frozen=True)
class StoreRecord:
    id: str
    name: str

    @classmethod
    def from_dict(cls, row: dict) -> "StoreRecord":
        return cls(id=str(row["id"]), name=str(row.get("name") or row["id"]))


@dataclass(frozen=True)
class EmployeeRecord:
    id: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, row: dict) -> "EmployeeRecord":
        return cls(id=str(row["id"]), name=_optional_str(row.get("name")))


@dataclass(frozen=True)
class RecordSet:
    """All records for one computation, already fetched and immutable."""
    shifts: tuple = ()
    sales_records: tuple = ()
    closeouts: tuple = ()
    stores: tuple = ()
    employees: tuple = ()
