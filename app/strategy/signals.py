"""Signal generation — pure functions, no I/O.

Given a candle window, classifies the most recent bar into a directional
signal with a confidence score and ATR-scaled trade levels.

Priority of the rules (first match wins):

* Bullish breakout → STRONG BUY (85–98 confidence).
* Bearish breakout → STRONG SELL (85–98 confidence).
* Fast EMA above slow, price above EMA50, RSI > 55, bullish trend → BUY (75).
* Mirror with RSI < 45 and bearish trend → SELL (75).
* Otherwise NEUTRAL (50).

A breakout needs all three of: price beyond the S/R window (plus an ATR
buffer) or beyond the Bollinger envelope, a volume surge, and a strong
candle closing in the breakout direction.
"""

import logging
import math
import time
import uuid
from dataclasses import dataclass
from typing import Sequence

from app.risk.sl_tp import calculate_risk_levels
from app.strategy.indicators import (
    calculate_atr,
    calculate_bollinger,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    calculate_support_resistance,
    safe_number,
)
from app.strategy.models import (
    CandleData,
    IndicatorSnapshot,
    KeyLevels,
    MACDSnapshot,
    MarketTrend,
    SignalType,
    TradingSignal,
)
from app.strategy.trend import classify_trend

logger = logging.getLogger("signalforge.strategy")


MIN_CANDLES = 50

SR_LOOKBACK = 40
VOLUME_LOOKBACK = 20
STRONG_BODY_RATIO = 0.7

BREAKOUT_BASE_CONFIDENCE = 85
BREAKOUT_RSI_BONUS = 10
BREAKOUT_TREND_BONUS = 5
MAX_CONFIDENCE = 98
TREND_CONFIDENCE = 75
NEUTRAL_CONFIDENCE = 50


@dataclass(frozen=True)
class BreakoutState:
    """Outcome of the breakout test on the last candle."""

    bullish: bool
    bearish: bool

    @property
    def active(self) -> bool:
        return self.bullish or self.bearish


def _new_signal_id() -> str:
    return uuid.uuid4().hex[:12]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _last(series: Sequence[float], fallback: float) -> float:
    return safe_number(series[-1], fallback) if series else fallback


# ── Building blocks ──────────────────────────────────────────────────────


def detect_volume_surge(
    volumes: Sequence[float],
    sensitivity: float = 1.0,
    lookback: int = VOLUME_LOOKBACK,
) -> bool:
    """Check whether the last volume is a surge over the trailing window.

    Either threshold is enough:
        - volume > mean + 1.5 × σ × *sensitivity*
        - volume > 2 × mean × *sensitivity*

    σ is the population standard deviation of the last *lookback* volumes
    (current bar included).  Non-finite volumes count as 0.
    """
    if not volumes:
        return False

    window = [safe_number(v) for v in volumes[-lookback:]]
    mean = sum(window) / len(window)
    std_dev = math.sqrt(sum((v - mean) * (v - mean) for v in window) / len(window))
    current = safe_number(volumes[-1])

    return (
        current > mean + 1.5 * std_dev * sensitivity
        or current > mean * 2 * sensitivity
    )


def is_strong_candle(candle: CandleData, body_ratio: float = STRONG_BODY_RATIO) -> bool:
    """A candle is strong when its body is at least *body_ratio* of its range.

    Zero-range candles (doji at a single price) are never strong.
    """
    candle_range = safe_number(candle.high) - safe_number(candle.low)
    body = abs(safe_number(candle.close) - safe_number(candle.open))
    return candle_range > 0 and body >= candle_range * body_ratio


def is_bullish_candle(candle: CandleData) -> bool:
    return safe_number(candle.close) > safe_number(candle.open)


def detect_breakout(
    candle: CandleData,
    levels: KeyLevels,
    upper_band: float,
    lower_band: float,
    atr: float,
    volume_surge: bool,
    sensitivity: float = 1.0,
) -> BreakoutState:
    """Evaluate bullish/bearish breakout conditions on *candle*.

    The S/R levels are widened by an ATR buffer of
    ``ATR × 0.1 × sensitivity``; crossing the Bollinger envelope counts
    as well.  Both sides require *volume_surge* and a strong candle, and
    the candle colour picks the side, so at most one side fires.
    """
    price = safe_number(candle.close)
    buffer = atr * 0.1 * sensitivity
    strong = is_strong_candle(candle)
    bullish_candle = is_bullish_candle(candle)

    bullish = (
        (price > levels.resistance + buffer or price > upper_band)
        and volume_surge
        and strong
        and bullish_candle
    )
    bearish = (
        (price < levels.support - buffer or price < lower_band)
        and volume_surge
        and strong
        and not bullish_candle
    )
    return BreakoutState(bullish=bullish, bearish=bearish)


def classify_signal(
    breakout: BreakoutState,
    trend: MarketTrend,
    price: float,
    rsi: float,
    ema_fast: float,
    ema_slow: float,
    ema50: float,
) -> tuple[SignalType, int]:
    """Map indicator state to ``(signal, confidence)``; first rule wins."""
    if breakout.bullish:
        confidence = BREAKOUT_BASE_CONFIDENCE
        if rsi > 60:
            confidence += BREAKOUT_RSI_BONUS
        if trend == MarketTrend.BULLISH:
            confidence += BREAKOUT_TREND_BONUS
        return SignalType.STRONG_BUY, min(MAX_CONFIDENCE, confidence)

    if breakout.bearish:
        confidence = BREAKOUT_BASE_CONFIDENCE
        if rsi < 40:
            confidence += BREAKOUT_RSI_BONUS
        if trend == MarketTrend.BEARISH:
            confidence += BREAKOUT_TREND_BONUS
        return SignalType.STRONG_SELL, min(MAX_CONFIDENCE, confidence)

    if ema_fast > ema_slow and price > ema50 and rsi > 55 and trend == MarketTrend.BULLISH:
        return SignalType.BUY, TREND_CONFIDENCE

    if ema_fast < ema_slow and price < ema50 and rsi < 45 and trend == MarketTrend.BEARISH:
        return SignalType.SELL, TREND_CONFIDENCE

    return SignalType.NEUTRAL, NEUTRAL_CONFIDENCE


def empty_signal(pair: str, timeframe: str) -> TradingSignal:
    """Neutral placeholder returned when there is too little data."""
    return TradingSignal(
        id=_new_signal_id(),
        pair=pair,
        timeframe=timeframe,
        signal=SignalType.NEUTRAL,
        confidence=0,
        entry=0.0,
        stop_loss=0.0,
        take_profit=0.0,
        trend=MarketTrend.SIDEWAYS,
        timestamp=_now_ms(),
        is_breakout=False,
        levels=KeyLevels(support=0.0, resistance=0.0),
        indicators=IndicatorSnapshot(
            rsi=50.0,
            ema9=0.0,
            ema21=0.0,
            ema50=0.0,
            ema200=0.0,
            macd=MACDSnapshot(macd=0.0, signal=0.0, histogram=0.0),
        ),
    )


# ── Entry point ──────────────────────────────────────────────────────────


def generate_signal(
    pair: str,
    timeframe: str,
    candles: Sequence[CandleData],
    rr_ratio: float = 2.0,
    is_scalping: bool = False,
    breakout_sensitivity: float = 1.0,
) -> TradingSignal:
    """Classify the latest bar of *candles* into a ``TradingSignal``.

    Args:
        pair: Instrument label, echoed into the result.
        timeframe: Timeframe label, echoed into the result.
        candles: Candle window, oldest-first.  At least 50 are needed.
        rr_ratio: Reward multiple of risk used to place the take-profit.
        is_scalping: Use 5/13 instead of 9/21 fast EMAs and a tighter
            ATR stop multiplier.
        breakout_sensitivity: Scales the volume-surge thresholds and the
            ATR breakout buffer.  Below 1 is more permissive.

    Returns:
        A new ``TradingSignal``.  Fewer than 50 candles yield the neutral
        placeholder from ``empty_signal()``.
    """
    if not candles or len(candles) < MIN_CANDLES:
        logger.debug(
            "%s %s: %d candles, need %d, returning neutral placeholder",
            pair, timeframe, len(candles) if candles else 0, MIN_CANDLES,
        )
        return empty_signal(pair, timeframe)

    sensitivity = safe_number(breakout_sensitivity, 1.0)

    closes = [c.close for c in candles]
    volumes = [c.volume for c in candles]
    current = candles[-1]
    price = safe_number(current.close)

    fast_period, slow_period = (5, 13) if is_scalping else (9, 21)
    ema_fast = _last(calculate_ema(closes, fast_period), price)
    ema_slow = _last(calculate_ema(closes, slow_period), price)
    ema50 = _last(calculate_ema(closes, 50), price)
    ema200 = _last(calculate_ema(closes, 200), price)
    rsi = _last(calculate_rsi(closes, 14), 50.0)
    bands = calculate_bollinger(closes, 20, 2.0)
    macd = calculate_macd(closes)
    atr = calculate_atr(candles, 14)
    levels = calculate_support_resistance(candles, SR_LOOKBACK)

    volume_surge = detect_volume_surge(volumes, sensitivity)
    breakout = detect_breakout(
        current,
        levels,
        upper_band=_last(bands.upper, price),
        lower_band=_last(bands.lower, price),
        atr=atr,
        volume_surge=volume_surge,
        sensitivity=sensitivity,
    )
    trend = classify_trend(price, ema50, ema200)
    signal, confidence = classify_signal(
        breakout, trend, price, rsi, ema_fast, ema_slow, ema50,
    )
    risk = calculate_risk_levels(price, signal, atr, rr_ratio, is_scalping)

    if breakout.active:
        logger.debug(
            "%s %s: %s breakout at %.5f (support %.5f, resistance %.5f)",
            pair, timeframe, "bullish" if breakout.bullish else "bearish",
            price, levels.support, levels.resistance,
        )

    macd_value = _last(macd.macd, 0.0)
    macd_signal = _last(macd.signal, 0.0)

    return TradingSignal(
        id=_new_signal_id(),
        pair=pair,
        timeframe=timeframe,
        signal=signal,
        confidence=confidence,
        entry=round(price, 5),
        stop_loss=risk.sl,
        take_profit=risk.tp,
        trend=trend,
        timestamp=_now_ms(),
        is_breakout=breakout.active,
        levels=KeyLevels(
            support=round(levels.support, 5),
            resistance=round(levels.resistance, 5),
        ),
        indicators=IndicatorSnapshot(
            rsi=rsi,
            ema9=ema_fast,
            ema21=ema_slow,
            ema50=ema50,
            ema200=ema200,
            macd=MACDSnapshot(
                macd=macd_value,
                signal=macd_signal,
                histogram=macd_value - macd_signal,
            ),
        ),
    )
