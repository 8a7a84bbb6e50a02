"""Tests for candle preparation — ordering, de-duplication and CSV loading."""

import math

import pandas as pd
import pytest

from app.data.candles import candles_from_records, load_candles_csv, prepare_candles


def _frame(rows) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=["time", "open", "high", "low", "close", "volume"])


class TestPrepareCandles:
    def test_ordered_input_is_kept(self):
        df = _frame([
            (100, 1.0, 2.0, 0.5, 1.5, 10),
            (200, 1.5, 2.5, 1.0, 2.0, 20),
        ])
        candles = prepare_candles(df)
        assert [c.time for c in candles] == [100, 200]
        assert candles[1].close == 2.0
        assert candles[1].volume == 20.0

    def test_duplicates_collapse_to_latest(self):
        df = _frame([
            (100, 1.0, 2.0, 0.5, 1.5, 10),
            (200, 1.5, 2.5, 1.0, 2.0, 20),
            (200, 1.5, 3.0, 1.0, 2.8, 35),
            (300, 2.8, 3.0, 2.5, 2.9, 15),
        ])
        candles = prepare_candles(df)
        assert [c.time for c in candles] == [100, 200, 300]
        assert candles[1].close == 2.8
        assert candles[1].volume == 35.0

    def test_out_of_order_rows_are_discarded(self):
        df = _frame([
            (100, 1.0, 2.0, 0.5, 1.5, 10),
            (300, 1.5, 2.5, 1.0, 2.0, 20),
            (200, 9.0, 9.0, 9.0, 9.0, 99),
            (400, 2.0, 2.5, 1.5, 2.2, 10),
        ])
        candles = prepare_candles(df)
        assert [c.time for c in candles] == [100, 300, 400]

    def test_missing_time_rows_are_dropped(self):
        df = _frame([
            (None, 1.0, 2.0, 0.5, 1.5, 10),
            (100, 1.0, 2.0, 0.5, 1.5, 10),
        ])
        assert [c.time for c in prepare_candles(df)] == [100]

    def test_unparseable_prices_become_nan(self):
        df = _frame([(100, "x", 2.0, 0.5, 1.5, 10)])
        candle = prepare_candles(df)[0]
        assert math.isnan(candle.open)

    def test_iso_timestamps(self):
        df = _frame([
            ("2025-01-01T00:00:00Z", 1.0, 2.0, 0.5, 1.5, 10),
            ("2025-01-01T00:05:00Z", 1.5, 2.5, 1.0, 2.0, 20),
        ])
        candles = prepare_candles(df)
        assert [c.time for c in candles] == [1735689600, 1735689900]

    def test_missing_columns(self):
        df = pd.DataFrame({"time": [1], "close": [1.0]})
        with pytest.raises(ValueError, match="open, high, low, volume"):
            prepare_candles(df)

    def test_empty_frame(self):
        assert prepare_candles(_frame([])) == []


class TestLoaders:
    def test_candles_from_records(self):
        records = [
            {"time": 200, "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 5},
            {"time": 100, "open": 1, "high": 2, "low": 0.5, "close": 1.2, "volume": 5},
            {"time": 300, "open": 1, "high": 2, "low": 0.5, "close": 1.8, "volume": 5},
        ]
        candles = candles_from_records(records)
        assert [c.time for c in candles] == [200, 300]

    def test_candles_from_no_records(self):
        assert candles_from_records([]) == []

    def test_load_csv(self, tmp_path):
        path = tmp_path / "candles.csv"
        path.write_text(
            "Time,Open,High,Low,Close,Volume\n"
            "100,1.0,2.0,0.5,1.5,10\n"
            "200,1.5,2.5,1.0,2.0,20\n",
            encoding="utf-8",
        )
        candles = load_candles_csv(path)
        assert len(candles) == 2
        assert candles[0].high == 2.0
