"""Strategy data models — typed representations for candles and signals."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class CandleData:
    """A single OHLCV candlestick bar (``time`` in epoch seconds)."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float


class SignalType(str, Enum):
    """Directional recommendation.  Values are the dashboard labels."""

    STRONG_BUY = "STRONG BUY"
    BUY = "BUY"
    NEUTRAL = "NEUTRAL"
    SELL = "SELL"
    STRONG_SELL = "STRONG SELL"

    @property
    def is_buy(self) -> bool:
        return self in (SignalType.STRONG_BUY, SignalType.BUY)

    @property
    def is_sell(self) -> bool:
        return self in (SignalType.STRONG_SELL, SignalType.SELL)


class MarketTrend(str, Enum):
    """EMA50/EMA200 trend classification."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    SIDEWAYS = "Sideways"


@dataclass(frozen=True)
class KeyLevels:
    """Support and resistance price levels."""

    support: float
    resistance: float


@dataclass(frozen=True)
class MACDSnapshot:
    macd: float
    signal: float
    histogram: float


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Last-bar indicator values used to derive a signal.

    ``ema9``/``ema21`` hold the fast/slow EMA pair, which runs on
    5/13 periods in scalping mode.
    """

    rsi: float
    ema9: float
    ema21: float
    ema50: float
    ema200: float
    macd: MACDSnapshot

    def to_dict(self) -> dict:
        return {
            "rsi": self.rsi,
            "ema9": self.ema9,
            "ema21": self.ema21,
            "ema50": self.ema50,
            "ema200": self.ema200,
            "macd": {
                "macd": self.macd.macd,
                "signal": self.macd.signal,
                "histogram": self.macd.histogram,
            },
        }


@dataclass(frozen=True)
class TradingSignal:
    """A classified trading recommendation with its risk levels.

    ``timestamp`` is wall-clock creation time in milliseconds.  Price
    fields are rounded to 5 decimal places.
    """

    id: str
    pair: str
    timeframe: str
    signal: SignalType
    confidence: int
    entry: float
    stop_loss: float
    take_profit: float
    trend: MarketTrend
    timestamp: int
    is_breakout: bool
    levels: KeyLevels
    indicators: IndicatorSnapshot

    def to_dict(self) -> dict:
        """Serialize to the camelCase shape the dashboard consumes."""
        return {
            "id": self.id,
            "pair": self.pair,
            "timeframe": self.timeframe,
            "signal": self.signal.value,
            "confidence": self.confidence,
            "entry": self.entry,
            "stopLoss": self.stop_loss,
            "takeProfit": self.take_profit,
            "trend": self.trend.value,
            "timestamp": self.timestamp,
            "isBreakout": self.is_breakout,
            "levels": {
                "support": self.levels.support,
                "resistance": self.levels.resistance,
            },
            "indicators": self.indicators.to_dict(),
        }


# ── Instrument catalogue ─────────────────────────────────────────────────

SUPPORTED_PAIRS: dict[str, str] = {
    "XAUUSD": "Commodities",
    "BTCUSD": "Crypto",
    "ETHUSD": "Crypto",
    "SOLUSD": "Crypto",
    "EURUSD": "Forex",
    "GBPUSD": "Forex",
    "USDJPY": "Forex",
    "AUDUSD": "Forex",
    "US30": "Indices",
    "NAS100": "Indices",
    "GER40": "Indices",
    "XTIUSD": "Commodities",
}


def is_supported_pair(symbol: str) -> bool:
    """Return True if *symbol* is in the instrument catalogue."""
    return symbol.upper() in SUPPORTED_PAIRS
