# SPDX-License-Identifier: Apache-2.0
"""
Tests for loading record sets from JSON bundles and CSV directories.
"""
import io
import json
import logging

import pytest

from store_analytics.data_loader import DataLoader
from store_analytics.tests.conftest import day, ts

BUNDLE = {
    "shifts": [
        {"id": "s-1", "storeId": "store-a", "employeeId": "emp-1", "shiftKind": "Open",
         "plannedStartAt": "2024-03-04T14:00:00Z", "endedAt": "2024-03-04T20:00:00Z",
         "startWeather": {"condition": "Rain", "desc": "light rain", "tempF": 48.5}, "endWeather": None},
        {"id": "s-2", "storeId": "store-a", "employeeId": "emp-1", "shiftKind": "close",
         "plannedStartAt": "not a timestamp", "endedAt": None},
        {"id": "s-3", "storeId": "store-a", "employeeId": "emp-1", "shiftKind": "swing",
         "plannedStartAt": "2024-03-04T14:00:00Z", "endedAt": None},
    ],
    "salesRecords": [
        {"storeId": "store-a", "businessDate": "2024-03-04", "openShiftId": "s-1", "closeShiftId": None,
         "openXCents": 5000, "closeSalesCents": None, "zReportCents": None, "rolloverInCents": 1000,
         "rolloverOutCents": None, "isRolloverNight": False, "openTxnCount": 12, "closeTxnCount": None},
    ],
    "closeouts": [
        {"storeId": "store-a", "businessDate": "2024-03-04", "status": "submitted", "cashCents": 1200,
         "cardCents": 3800, "expectedDepositCents": 1200, "actualDepositCents": 1150, "varianceCents": -50},
    ],
    "stores": [{"id": "store-a", "name": "Downtown"}],
    "employees": [{"id": "emp-1", "name": "Avery"}],
}

SHIFTS_CSV = """id,storeId,employeeId,shiftKind,plannedStartAt,endedAt,isDeleted,startWeatherCondition,startWeatherDesc,startTempF,endWeatherCondition,endWeatherDesc,endTempF
s-1,store-a,emp-1,close,2024-03-04T20:00:00Z,2024-03-05T02:00:00Z,false,Clear,clear sky,61.2,,,
s-2,store-a,emp-2,open,2024-03-05T13:00:00Z,,true,,,,,,
"""

SALES_CSV = """storeId,businessDate,openShiftId,closeShiftId,openXCents,closeSalesCents,zReportCents,rolloverInCents,rolloverOutCents,isRolloverNight,openTxnCount,closeTxnCount
store-a,2024-03-04,,s-1,,4200,,,300,true,,17
store-a,2024-13-45,,,,100,,,,false,,
"""


class TestJsonBundle:
    def test_dict_bundle(self, caplog):
        with caplog.at_level(logging.WARNING):
            records = DataLoader(data=BUNDLE).records

        assert [shift.id for shift in records.shifts] == ["s-1"]
        shift = records.shifts[0]
        assert shift.shift_kind == "open"
        assert shift.planned_start_at == ts("2024-03-04T14:00:00Z")
        assert shift.start_weather.description == "light rain"
        assert shift.start_weather.temp_f == 48.5
        assert shift.end_weather is None
        assert "Skipping malformed shifts row 1" in caplog.text
        assert "Skipping malformed shifts row 2" in caplog.text

        sales = records.sales_records[0]
        assert sales.open_x_cents == 5000
        assert sales.close_sales_cents is None
        assert sales.business_date == day("2024-03-04")

        assert records.closeouts[0].variance_cents == -50
        assert records.stores[0].name == "Downtown"
        assert records.employees[0].name == "Avery"

    def test_stream_bundle(self):
        records = DataLoader(data=io.StringIO(json.dumps(BUNDLE))).records
        assert len(records.sales_records) == 1

    def test_file_bundle(self, tmp_path):
        path = tmp_path / "bundle.json"
        path.write_text(json.dumps(BUNDLE))
        assert len(DataLoader(data=str(path)).records.closeouts) == 1

    def test_missing_keys_are_empty(self):
        records = DataLoader(data={"stores": [{"id": "store-a"}]}).records
        assert records.shifts == ()
        assert records.stores[0].name == "store-a"


class TestCsvDirectory:
    def test_reads_csv_files(self, tmp_path, caplog):
        (tmp_path / "shifts.csv").write_text(SHIFTS_CSV)
        (tmp_path / "sales_records.csv").write_text(SALES_CSV)

        with caplog.at_level(logging.WARNING):
            records = DataLoader(data=str(tmp_path)).records

        assert len(records.shifts) == 2
        first, second = records.shifts
        assert first.is_deleted is False
        assert first.start_weather.condition == "Clear"
        assert first.start_weather.temp_f == 61.2
        assert first.end_weather is None
        assert second.is_deleted is True
        assert second.ended_at is None

        assert len(records.sales_records) == 1
        sales = records.sales_records[0]
        assert sales.close_shift_id == "s-1"
        assert sales.open_shift_id is None
        assert sales.close_sales_cents == 4200
        assert sales.rollover_out_cents == 300
        assert sales.is_rollover_night is True
        assert sales.open_txn_count is None
        assert "Skipping malformed salesRecords row 1" in caplog.text

        assert records.closeouts == ()


class TestDataSourceFallback:
    def test_data_path_from_config(self, tmp_path):
        path = tmp_path / "bundle.json"
        path.write_text(json.dumps(BUNDLE))
        records = DataLoader(cfg={"setup": {"data_path": str(path)}}).records
        assert len(records.stores) == 1

    def test_no_source(self):
        with pytest.raises(ValueError):
            DataLoader(cfg={"setup": {}})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DataLoader(data=str(tmp_path / "absent.json"))
