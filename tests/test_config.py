"""Tests for app.config — environment variable loading and validation."""

import os

import pytest

from app.config import Config, load_config

_VARS = [
    "DEFAULT_PAIR",
    "DEFAULT_TIMEFRAME",
    "RISK_PERCENTAGE",
    "RR_RATIO",
    "SCALPING_MODE",
    "BREAKOUT_SENSITIVITY",
    "TIMEZONE",
    "HISTORY_LIMIT",
    "LOG_LEVEL",
    "API_PORT",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def no_env_file(tmp_path):
    return str(tmp_path / "nonexistent.env")


class TestLoadConfig:
    def test_defaults(self, no_env_file):
        cfg = load_config(env_path=no_env_file)
        assert cfg.default_pair == "XAUUSD"
        assert cfg.default_timeframe == "5M"
        assert cfg.risk_percentage == 1.0
        assert cfg.rr_ratio == 2.0
        assert cfg.scalping_mode is False
        assert cfg.breakout_sensitivity == 1.0
        assert cfg.timezone == "UTC"
        assert cfg.history_limit == 50
        assert cfg.log_level == "INFO"
        assert cfg.api_port == 8080

    def test_overrides(self, monkeypatch, no_env_file):
        monkeypatch.setenv("DEFAULT_PAIR", "btcusd")
        monkeypatch.setenv("RR_RATIO", "3")
        monkeypatch.setenv("SCALPING_MODE", "yes")
        monkeypatch.setenv("BREAKOUT_SENSITIVITY", "0.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        cfg = load_config(env_path=no_env_file)
        assert cfg.default_pair == "BTCUSD"
        assert cfg.rr_ratio == 3.0
        assert cfg.scalping_mode is True
        assert cfg.breakout_sensitivity == 0.5
        assert cfg.log_level == "DEBUG"

    def test_reads_env_file(self, tmp_path, monkeypatch):
        # load_dotenv writes into os.environ; keep those writes inside this test
        monkeypatch.setattr(os, "environ", os.environ.copy())
        env_file = tmp_path / ".env"
        env_file.write_text("RR_RATIO=4.5\nHISTORY_LIMIT=10\n", encoding="utf-8")
        cfg = load_config(env_path=str(env_file))
        assert cfg.rr_ratio == 4.5
        assert cfg.history_limit == 10

    def test_signal_params(self, monkeypatch, no_env_file):
        monkeypatch.setenv("SCALPING_MODE", "1")
        cfg = load_config(env_path=no_env_file)
        assert cfg.signal_params() == {
            "rr_ratio": 2.0,
            "is_scalping": True,
            "breakout_sensitivity": 1.0,
        }

    def test_config_is_frozen(self, no_env_file):
        cfg = load_config(env_path=no_env_file)
        assert isinstance(cfg, Config)
        with pytest.raises(AttributeError):
            cfg.rr_ratio = 5.0


class TestValidation:
    def test_unparseable_number_names_variable(self, monkeypatch, no_env_file):
        monkeypatch.setenv("RR_RATIO", "two")
        with pytest.raises(ValueError, match="RR_RATIO"):
            load_config(env_path=no_env_file)

    def test_unparseable_bool_names_variable(self, monkeypatch, no_env_file):
        monkeypatch.setenv("SCALPING_MODE", "maybe")
        with pytest.raises(ValueError, match="SCALPING_MODE"):
            load_config(env_path=no_env_file)

    @pytest.mark.parametrize("var, raw", [("RR_RATIO", "nan"), ("BREAKOUT_SENSITIVITY", "nan"), ("BREAKOUT_SENSITIVITY", "inf")])
    def test_non_finite_number_names_variable(self, monkeypatch, no_env_file, var, raw):
        monkeypatch.setenv(var, raw)
        with pytest.raises(ValueError, match=var):
            load_config(env_path=no_env_file)

    def test_non_positive_sensitivity(self, monkeypatch, no_env_file):
        monkeypatch.setenv("BREAKOUT_SENSITIVITY", "0")
        with pytest.raises(ValueError, match="BREAKOUT_SENSITIVITY"):
            load_config(env_path=no_env_file)

    def test_risk_percentage_range(self, monkeypatch, no_env_file):
        monkeypatch.setenv("RISK_PERCENTAGE", "150")
        with pytest.raises(ValueError, match="RISK_PERCENTAGE"):
            load_config(env_path=no_env_file)

    def test_collects_all_range_errors(self, monkeypatch, no_env_file):
        monkeypatch.setenv("RR_RATIO", "-1")
        monkeypatch.setenv("HISTORY_LIMIT", "0")
        with pytest.raises(ValueError, match="RR_RATIO.*HISTORY_LIMIT"):
            load_config(env_path=no_env_file)
