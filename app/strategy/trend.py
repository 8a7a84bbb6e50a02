"""Trend detection — EMA50/EMA200 directional bias.

The trend gate is shared by the signal classifier: BUY/SELL signals
require an aligned trend, and breakout confidence gets a bonus when the
breakout runs with it.
"""

from app.strategy.models import MarketTrend


def classify_trend(price: float, ema50: float, ema200: float) -> MarketTrend:
    """Classify trend direction using EMA50/EMA200 and price position.

    Rules:
        - **Bullish**: EMA50 > EMA200 AND price > EMA50.
        - **Bearish**: EMA50 < EMA200 AND price < EMA50.
        - **Sideways**: everything else (EMAs crossing, price between them).
    """
    if ema50 > ema200 and price > ema50:
        return MarketTrend.BULLISH
    if ema50 < ema200 and price < ema50:
        return MarketTrend.BEARISH
    return MarketTrend.SIDEWAYS
