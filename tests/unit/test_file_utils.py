"""
Unit tests for file utilities.
"""

from datetime import datetime

import pandas as pd
import pytest

from admin_console.utils.file_utils import generate_filename, load_json, save_csv, save_json


class TestJson:
    """Test cases for JSON helpers."""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "actions.json"
        data = [{"type": "admin/APPROVE_STUDENT", "payload": {"studentId": "STU004"}}]

        assert save_json(data, path) is True
        assert load_json(path) == data

    def test_save_unserializable(self, tmp_path):
        assert save_json({"when": datetime(2025, 3, 14)}, tmp_path / "bad.json") is False

    def test_load_missing_returns_none(self, tmp_path):
        assert load_json(tmp_path / "absent.json") is None

    def test_load_missing_required_raises(self, tmp_path):
        with pytest.raises(ValueError, match="JSON file not found"):
            load_json(tmp_path / "absent.json", required=True)

    def test_load_invalid(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2", encoding="utf-8")

        assert load_json(path) is None
        with pytest.raises(ValueError, match="Invalid JSON in file"):
            load_json(path, required=True)


class TestCsv:
    """Test cases for CSV helpers."""

    def test_save_csv(self, tmp_path):
        path = tmp_path / "reports" / "payouts.csv"
        df = pd.DataFrame({"instructor_id": ["INS001"], "pending_payment": [320.0]})

        assert save_csv(df, path) is True
        assert pd.read_csv(path).to_dict("records") == [
            {"instructor_id": "INS001", "pending_payment": 320.0}
        ]


def test_generate_filename():
    assert generate_filename("run_report", "json", datetime(2024, 3, 1, 10, 30, 45)) == (
        "run_report_20240301_103045.json"
    )
