"""Technical indicators — EMA, SMA, σ, Bollinger, RSI, MACD, ATR, S/R. Pure functions, no I/O.

Every function here is total: empty or malformed input (``NaN``,
``inf``, non-numeric values) never raises.  Bad samples are replaced by a
fallback at the point of use and series keep the length of their input.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Sequence

from app.strategy.models import CandleData, KeyLevels


@dataclass(frozen=True)
class BollingerBands:
    """Upper/lower envelopes around the SMA, one value per input sample."""

    upper: list[float]
    lower: list[float]
    sma: list[float]


@dataclass(frozen=True)
class MACDSeries:
    macd: list[float]
    signal: list[float]
    histogram: list[float]


def safe_number(value, fallback: float = 0.0) -> float:
    """Return *value* as a float if it is a finite real number, else *fallback*."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return fallback
    try:
        value = float(value)
    except OverflowError:
        return fallback
    if not math.isfinite(value):
        return fallback
    return value


def _window(period) -> int:
    # Periods below 1 would divide by zero; clamp them.
    return max(int(safe_number(period, 1.0)), 1)


# ── Moving averages ──────────────────────────────────────────────────────


def calculate_ema(data: Sequence[float], period: int) -> list[float]:
    """Calculate an Exponential Moving Average series.

    Uses the standard EMA formula:
        ``EMA_today = price × k + EMA_yesterday × (1 - k)``
    where ``k = 2 / (period + 1)``.

    The series is seeded with ``data[0]`` rather than the SMA of the first
    *period* samples, so the first ~*period* values lean towards the
    opening price.  Signal thresholds are tuned against this seeding.

    A non-finite sample is replaced by the previous EMA value.
    """
    if not data:
        return []

    k = 2.0 / (_window(period) + 1)
    prev = safe_number(data[0], 0.0)
    ema: list[float] = [prev]

    for value in data[1:]:
        price = safe_number(value, prev)
        prev = price * k + prev * (1 - k)
        ema.append(prev)

    return ema


def calculate_sma(data: Sequence[float], period: int) -> list[float]:
    """Calculate a Simple Moving Average series.

    Indices before the first full window carry the raw sample (or 0 when
    it is non-finite) so the output keeps the input length.
    """
    if not data:
        return []

    period = _window(period)
    sma: list[float] = []
    for i in range(len(data)):
        if i < period - 1:
            sma.append(safe_number(data[i], 0.0))
            continue
        window = data[i - period + 1 : i + 1]
        sma.append(sum(safe_number(v, 0.0) for v in window) / period)
    return sma


def calculate_std_dev(data: Sequence[float], period: int) -> list[float]:
    """Population standard deviation over a trailing *period* window.

    Returns zeros before the window fills, and an all-zero series when
    there are fewer than *period* samples.
    """
    period = _window(period)
    if len(data) < period:
        return [0.0] * len(data)

    sma = calculate_sma(data, period)
    sd: list[float] = []
    for i in range(len(data)):
        if i < period - 1:
            sd.append(0.0)
            continue
        mean = sma[i]
        window = data[i - period + 1 : i + 1]
        deviations = [safe_number(v, mean) - mean for v in window]
        variance = sum(d * d for d in deviations) / period
        sd.append(safe_number(math.sqrt(variance), 0.0))
    return sd


# ── Bollinger Bands ──────────────────────────────────────────────────────


def calculate_bollinger(
    data: Sequence[float],
    period: int = 20,
    multiplier: float = 2.0,
) -> BollingerBands:
    """Calculate Bollinger Bands.

    Middle = SMA(data, *period*)
    Upper  = middle + *multiplier* × σ
    Lower  = middle − *multiplier* × σ

    With fewer than *period* samples every band is all zeros.
    """
    n = len(data)
    if n < _window(period):
        return BollingerBands(upper=[0.0] * n, lower=[0.0] * n, sma=[0.0] * n)

    sma = calculate_sma(data, period)
    sd = calculate_std_dev(data, period)
    multiplier = safe_number(multiplier, 2.0)

    upper = [m + multiplier * safe_number(s, 0.0) for m, s in zip(sma, sd)]
    lower = [m - multiplier * safe_number(s, 0.0) for m, s in zip(sma, sd)]
    return BollingerBands(upper=upper, lower=lower, sma=sma)


# ── RSI ──────────────────────────────────────────────────────────────────


def _rsi_from_avgs(avg_gain: float, avg_loss: float) -> float:
    # A window without losses caps RS at 100 instead of going infinite.
    rs = 100.0 if avg_loss == 0 or math.isnan(avg_loss) else avg_gain / avg_loss
    rsi = 100.0 - 100.0 / (1.0 + rs)
    return 50.0 if math.isnan(rsi) else rsi


def calculate_rsi(data: Sequence[float], period: int = 14) -> list[float]:
    """Calculate Wilder's Relative Strength Index.

    Algorithm (Wilder-smoothed):
        1. delta = price[i] - price[i-1]; delta >= 0 is a gain.
        2. Seed average gain/loss = sum of deltas 1..period ÷ period.
        3. Subsequent: avg = (prev_avg × (period-1) + current) / period
        4. RS = avg_gain / avg_loss, or 100 when avg_loss is 0.
        5. RSI = 100 - 100 / (1 + RS)

    Returns a list the same length as *data*.  Entries before index
    *period* hold the neutral value 50, as does every entry when fewer
    than 2 samples are supplied.
    """
    n = len(data)
    rsi: list[float] = [50.0] * n
    if n < 2:
        return rsi

    period = _window(period)
    prices = [safe_number(v, 0.0) for v in data]

    gains = 0.0
    losses = 0.0
    for i in range(1, min(n, period + 1)):
        diff = prices[i] - prices[i - 1]
        if diff >= 0:
            gains += diff
        else:
            losses -= diff

    avg_gain = gains / period
    avg_loss = losses / period

    if n > period:
        rsi[period] = _rsi_from_avgs(avg_gain, avg_loss)

        for i in range(period + 1, n):
            diff = prices[i] - prices[i - 1]
            gain = diff if diff >= 0 else 0.0
            loss = -diff if diff < 0 else 0.0
            avg_gain = (avg_gain * (period - 1) + gain) / period
            avg_loss = (avg_loss * (period - 1) + loss) / period
            rsi[i] = _rsi_from_avgs(avg_gain, avg_loss)

    return [safe_number(v, 50.0) for v in rsi]


# ── MACD ─────────────────────────────────────────────────────────────────


def calculate_macd(data: Sequence[float]) -> MACDSeries:
    """Calculate MACD(12, 26, 9).

    ``macd = EMA12 − EMA26``, ``signal = EMA9(macd)``,
    ``histogram = macd − signal``.
    """
    if not data:
        return MACDSeries(macd=[], signal=[], histogram=[])

    ema12 = calculate_ema(data, 12)
    ema26 = calculate_ema(data, 26)
    macd_line = [
        safe_number(fast, 0.0) - safe_number(slow, fast) for fast, slow in zip(ema12, ema26)
    ]
    signal_line = calculate_ema(macd_line, 9)
    histogram = [
        safe_number(m, 0.0) - safe_number(s, m) for m, s in zip(macd_line, signal_line)
    ]
    return MACDSeries(macd=macd_line, signal=signal_line, histogram=histogram)


# ── ATR ──────────────────────────────────────────────────────────────────


def calculate_atr(candles: Sequence[CandleData], period: int = 14) -> float:
    """Calculate the Average True Range over the last *period* intervals.

    Uses the standard True Range definition:
        TR = max(high - low, |high - prev_close|, |low - prev_close|)

    With fewer than ``period + 1`` candles the average runs over every
    available interval.  Returns 0.0 for fewer than 2 candles.
    """
    n = len(candles)
    if n < 2:
        return 0.0

    start = max(1, n - _window(period))
    count = n - start

    tr_sum = 0.0
    for i in range(start, n):
        high = safe_number(candles[i].high)
        low = safe_number(candles[i].low)
        prev_close = safe_number(candles[i - 1].close)
        tr_sum += max(high - low, abs(high - prev_close), abs(low - prev_close))

    return safe_number(tr_sum / count, 0.0)


# ── Support / resistance ─────────────────────────────────────────────────


def calculate_support_resistance(
    candles: Sequence[CandleData],
    lookback: int = 30,
) -> KeyLevels:
    """Window extremes over the trailing *lookback* candles.

    ``resistance`` is the highest high and ``support`` the lowest low.
    Returns zeros when fewer than *lookback* candles are available.
    """
    lookback = _window(lookback)
    if len(candles) < lookback:
        return KeyLevels(support=0.0, resistance=0.0)

    window = candles[-lookback:]
    resistance = max(safe_number(c.high) for c in window)
    support = min(safe_number(c.low) for c in window)
    return KeyLevels(
        support=safe_number(support, 0.0),
        resistance=safe_number(resistance, 0.0),
    )
