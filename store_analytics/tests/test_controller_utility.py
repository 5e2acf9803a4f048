# SPDX-License-Identifier: Apache-2.0
import datetime
import io
import json
import unittest
from unittest.mock import patch, MagicMock

import requests

from store_analytics.controller_utility import Encoder, load_yaml_from_stream, load_yaml_from_url
from store_analytics.summary import StorePeriodSummary, VelocityEntry

VALID_CONFIG_YAML = """
setup:
  timezone: America/Denver
thresholds:
  sigma_band: 1.5
"""

INVALID_YAML_SYNTAX = """
thresholds:
  bad_weather_keywords: [ unterminated list
"""


class TestLoadYaml(unittest.TestCase):

    def test_load_from_stream_adds_line_numbers(self):
        cfg = load_yaml_from_stream(io.BytesIO(VALID_CONFIG_YAML.encode("utf-8")))
        self.assertEqual(cfg["setup"]["timezone"], "America/Denver")
        self.assertEqual(cfg["thresholds"]["__line__"], 5)

    def test_load_from_stream_invalid_yaml(self):
        with self.assertRaises(ValueError):
            load_yaml_from_stream(io.StringIO(INVALID_YAML_SYNTAX))

    @patch("requests.get")
    def test_load_from_url_success(self, mock_requests_get):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content.decode.return_value = VALID_CONFIG_YAML
        mock_requests_get.return_value = mock_response

        cfg = load_yaml_from_url("https://example.com/store-report.yaml")
        self.assertEqual(cfg["thresholds"]["sigma_band"], 1.5)
        mock_requests_get.assert_called_once_with("https://example.com/store-report.yaml", allow_redirects=True)

    @patch("requests.get")
    def test_load_from_url_http_error(self, mock_requests_get):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Not Found")
        mock_requests_get.return_value = mock_response

        with self.assertRaises(ConnectionError):
            load_yaml_from_url("https://example.com/missing.yaml")

    @patch("requests.get")
    def test_load_from_url_invalid_yaml(self, mock_requests_get):
        mock_response = MagicMock()
        mock_response.content.decode.return_value = INVALID_YAML_SYNTAX
        mock_requests_get.return_value = mock_response

        with self.assertRaises(ValueError):
            load_yaml_from_url("https://example.com/broken.yaml")


class TestEncoder(unittest.TestCase):

    def test_encodes_summaries_with_iso_dates(self):
        summary = StorePeriodSummary(
            store_id="store-a",
            store_name="Downtown",
            period_from=datetime.date(2024, 3, 4),
            period_to=datetime.date(2024, 3, 10),
            best_day=VelocityEntry("Friday", 12345, None, 2),
        )
        encoded = json.loads(json.dumps([summary], cls=Encoder))[0]
        self.assertEqual(encoded["period_from"], "2024-03-04")
        self.assertIsNone(encoded["gross_sales_cents"])
        self.assertEqual(encoded["best_day"]["label"], "Friday")
        self.assertIsNone(encoded["previous_deltas"]["rplh_cents"])
        self.assertEqual(encoded["day_of_week_averages"], [])
