import json
import logging
import os
from pathlib import Path

import pandas as pd

from store_analytics.records import (
    EmployeeRecord, RecordSet, SafeCloseoutRecord, SalesRecord, ShiftRecord, StoreRecord
)

logger = logging.getLogger(__name__)

# bundle key -> (CSV file name, record type)
RECORD_SOURCES = {
    'shifts': ('shifts.csv', ShiftRecord),
    'salesRecords': ('sales_records.csv', SalesRecord),
    'closeouts': ('closeouts.csv', SafeCloseoutRecord),
    'stores': ('stores.csv', StoreRecord),
    'employees': ('employees.csv', EmployeeRecord),
}


class DataLoader:

    def __init__(self, cfg: dict = None, data: any = None):
        """
        Initializes the DataLoader that loads the input records based on the fallback logic:
        1. Use `data` if provided: a dict bundle, a readable JSON stream, a JSON file path
           or a directory of CSV files.
        2. If not, use `data_path` from the 'setup' section of `cfg`.
        3. If neither is available, raise an error.

        Args:
            cfg (dict, optional): The store report YAML configuration.
            data (any, optional): The input data source. Defaults to None.
        """
        self.cfg = cfg or {}

        if data is None:
            data = (self.cfg.get('setup') or {}).get('data_path')
            if not data:
                raise ValueError(
                    "No data source provided. Please provide a JSON bundle, a CSV directory or a 'data_path' "
                    "in your YAML config.")
            logger.info(f"No data provided. Loading records from configured data_path {data}")

        self.bundle = self._read_bundle(data)
        self.records = RecordSet(**{
            field_name: tuple(self._parse_rows(key, self.bundle.get(key) or []))
            for key, field_name in (('shifts', 'shifts'), ('salesRecords', 'sales_records'),
                                    ('closeouts', 'closeouts'), ('stores', 'stores'), ('employees', 'employees'))
        })
        logger.info(f"Loaded {len(self.records.shifts)} shifts, {len(self.records.sales_records)} sales records, "
                    f"{len(self.records.closeouts)} closeouts, {len(self.records.stores)} stores and "
                    f"{len(self.records.employees)} employees")

    @staticmethod
    def _read_bundle(data) -> dict:
        if isinstance(data, dict):
            return data
        if hasattr(data, 'read'):
            content = data.read()
            if isinstance(content, bytes):
                content = content.decode('utf-8')
            return json.loads(content)

        path = Path(data)
        if path.is_dir():
            logger.info(f"Reading CSV record files from directory {path}")
            return _read_csv_directory(path)
        if not path.exists():
            raise FileNotFoundError(f"Data source not found at: {path}")
        with open(path, 'r') as f:
            return json.load(f)

    @staticmethod
    def _parse_rows(key: str, rows: list) -> list:
        """
        Convert raw rows to records, skipping rows that fail to parse.

        A malformed timestamp, date or shift kind drops that one row with a warning
        instead of failing the whole report.
        """
        record_type = RECORD_SOURCES[key][1]
        parsed = []
        for index, row in enumerate(rows):
            try:
                parsed.append(record_type.from_dict(row))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed {key} row {index}: {e}")
        return parsed


def _read_csv_directory(directory: Path) -> dict:
    """
    Read every known CSV file in a directory into bundle rows.

    All columns are read as strings and empty cells become None, so absent readings stay
    absent instead of turning into NaN or 0.
    """
    bundle = {}
    for key, (file_name, _) in RECORD_SOURCES.items():
        csv_path = os.path.join(directory, file_name)
        if not os.path.exists(csv_path):
            logger.debug(f"No {file_name} in {directory}, treating {key} as empty")
            bundle[key] = []
            continue
        df = pd.read_csv(csv_path, dtype=str)
        df = df.astype(object).where(pd.notna(df), None)
        bundle[key] = df.to_dict(orient='records')
    return bundle
