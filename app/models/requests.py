"""Request bodies for the internal API.

Optional analysis parameters left as ``None`` fall back to the runtime
settings held by the router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CandleIn(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class SignalRequest(BaseModel):
    """Body of ``POST /signals``."""

    pair: str
    timeframe: str
    candles: list[CandleIn]
    rr_ratio: Optional[float] = Field(default=None, gt=0)
    is_scalping: Optional[bool] = None
    breakout_sensitivity: Optional[float] = Field(default=None, gt=0)


class IndicatorRequest(BaseModel):
    """Body of ``POST /indicators``: closing prices, oldest-first."""

    closes: list[float]
    rsi_period: int = Field(default=14, ge=1)
    ema_periods: list[int] = Field(default_factory=lambda: [9, 21, 50, 200])
    bollinger_period: int = Field(default=20, ge=1)
    bollinger_multiplier: float = 2.0


class BacktestRequest(BaseModel):
    candles: list[CandleIn] = Field(default_factory=list)
    rr_ratio: Optional[float] = Field(default=None, gt=0)


class ProfitRequest(BaseModel):
    """Body of ``POST /profit`` (defaults mirror the dashboard simulator)."""

    balance: float = Field(default=1000.0, gt=0)
    risk_pct: float = Field(default=1.0, ge=0)
    rr_ratio: float = Field(default=2.0, ge=0)
    win_rate_pct: float = Field(default=50.0, ge=0, le=100)
    trades: int = Field(default=10, ge=0)
