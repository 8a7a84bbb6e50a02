"""Tests for the CLI entry point."""

import json

import pytest

from app.main import _run_cli


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ["DEFAULT_PAIR", "DEFAULT_TIMEFRAME", "RR_RATIO", "SCALPING_MODE", "BREAKOUT_SENSITIVITY"]:
        monkeypatch.delenv(var, raising=False)


def _write_flat_csv(path, count: int = 60) -> None:
    rows = ["time,open,high,low,close,volume"]
    rows += [f"{1_700_000_000 + i * 300},100,100,100,100,100" for i in range(count)]
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")


class TestAnalyzeMode:
    def test_prints_signal_json(self, tmp_path, capsys):
        csv_path = tmp_path / "candles.csv"
        _write_flat_csv(csv_path)
        _run_cli(["--mode", "analyze", "--csv", str(csv_path), "--pair", "EURUSD", "--timeframe", "1H"])
        data = json.loads(capsys.readouterr().out)
        assert data["pair"] == "EURUSD"
        assert data["timeframe"] == "1H"
        assert data["signal"] == "NEUTRAL"
        assert data["stopLoss"] == pytest.approx(100.1)

    def test_defaults_from_config(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("DEFAULT_PAIR", "BTCUSD")
        monkeypatch.setenv("RR_RATIO", "3")
        csv_path = tmp_path / "candles.csv"
        _write_flat_csv(csv_path)
        _run_cli(["--mode", "analyze", "--csv", str(csv_path)])
        data = json.loads(capsys.readouterr().out)
        assert data["pair"] == "BTCUSD"
        assert data["timeframe"] == "5M"
        assert data["takeProfit"] == pytest.approx(99.7)

    def test_analyze_requires_csv(self):
        with pytest.raises(SystemExit):
            _run_cli(["--mode", "analyze"])
