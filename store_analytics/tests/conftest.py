# SPDX-License-Identifier: Apache-2.0
"""
Shared record builders for the store analytics test suite.

Timestamps default to mid-afternoon UTC so that the America/Chicago business date is
the same calendar date as the UTC one, which keeps expected dates easy to read.
"""
import datetime

import pytest

from store_analytics.records import (
    EmployeeRecord, RecordSet, SafeCloseoutRecord, SalesRecord, ShiftRecord, StoreRecord, WeatherObservation
)


def ts(value: str) -> datetime.datetime:
    return datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))


def day(value: str) -> datetime.date:
    return datetime.date.fromisoformat(value)


def make_shift(shift_id, date="2024-03-04", kind="close", store_id="store-a", employee_id="emp-1",
               start="15:00", end="23:00", is_deleted=False, start_weather=None, end_weather=None):
    return ShiftRecord(
        id=shift_id,
        store_id=store_id,
        employee_id=employee_id,
        shift_kind=kind,
        planned_start_at=ts(f"{date}T{start}:00Z"),
        ended_at=ts(f"{date}T{end}:00Z") if end is not None else None,
        is_deleted=is_deleted,
        start_weather=start_weather,
        end_weather=end_weather,
    )


def make_sales(date="2024-03-04", store_id="store-a", **kwargs):
    return SalesRecord(store_id=store_id, business_date=day(date), **kwargs)


def make_closeout(date="2024-03-04", store_id="store-a", status="submitted", **kwargs):
    return SafeCloseoutRecord(store_id=store_id, business_date=day(date), status=status, **kwargs)


def weather(condition, description=None, temp_f=None):
    return WeatherObservation(condition=condition, description=description, temp_f=temp_f)


def two_store_records():
    """Store B sells exactly three times Store A, every day, over three days."""
    sales = []
    for date, a_sales in (("2024-03-04", 10000), ("2024-03-05", 12000), ("2024-03-06", 8000)):
        sales.append(make_sales(date, "store-a", close_sales_cents=a_sales, close_txn_count=10))
        sales.append(make_sales(date, "store-b", close_sales_cents=a_sales * 3, close_txn_count=30))
    shifts = [
        make_shift("a-1", "2024-03-04", store_id="store-a"),
        make_shift("b-1", "2024-03-04", store_id="store-b", employee_id="emp-2"),
    ]
    return RecordSet(
        shifts=tuple(shifts),
        sales_records=tuple(sales),
        stores=(StoreRecord("store-a", "Downtown"), StoreRecord("store-b", "Airport")),
        employees=(EmployeeRecord("emp-1", "Avery"), EmployeeRecord("emp-2", "Jordan")),
    )


@pytest.fixture
def records():
    return two_store_records()
