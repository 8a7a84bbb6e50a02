"""SignalForge — application configuration.

Loads .env variables into a typed config object.
Validates values on startup; every variable has a default.
"""

import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    default_pair: str
    default_timeframe: str
    risk_percentage: float
    rr_ratio: float
    scalping_mode: bool
    breakout_sensitivity: float
    timezone: str
    history_limit: int
    log_level: str
    api_port: int

    def signal_params(self) -> dict:
        """Keyword arguments for ``generate_signal`` from these settings."""
        return {
            "rr_ratio": self.rr_ratio,
            "is_scalping": self.scalping_mode,
            "breakout_sensitivity": self.breakout_sensitivity,
        }


def _float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {raw!r}")
    return value


def _int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool(name: str, default: str) -> bool:
    raw = os.environ.get(name, default).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the offending variable when
    a value cannot be parsed or is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    config = Config(
        default_pair=os.environ.get("DEFAULT_PAIR", "XAUUSD").upper(),
        default_timeframe=os.environ.get("DEFAULT_TIMEFRAME", "5M"),
        risk_percentage=_float("RISK_PERCENTAGE", "1.0"),
        rr_ratio=_float("RR_RATIO", "2.0"),
        scalping_mode=_bool("SCALPING_MODE", "false"),
        breakout_sensitivity=_float("BREAKOUT_SENSITIVITY", "1.0"),
        timezone=os.environ.get("TIMEZONE", "UTC"),
        history_limit=_int("HISTORY_LIMIT", "50"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        api_port=_int("API_PORT", "8080"),
    )

    errors = []
    if config.rr_ratio <= 0:
        errors.append("RR_RATIO must be positive")
    if config.breakout_sensitivity <= 0:
        errors.append("BREAKOUT_SENSITIVITY must be positive")
    if not 0 < config.risk_percentage <= 100:
        errors.append("RISK_PERCENTAGE must be in (0, 100]")
    if config.history_limit < 1:
        errors.append("HISTORY_LIMIT must be at least 1")
    if errors:
        raise ValueError("; ".join(errors))

    return config
