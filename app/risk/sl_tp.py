"""Stop-loss and take-profit calculation — pure math, no I/O.

ATR-scaled approach:
    risk = max(ATR × multiplier, price × 0.001)
    SL sits one risk unit against the trade, TP sits ``rr_ratio`` risk
    units in favour of it.

Only buy-family signals (BUY, STRONG BUY) take the long-side formulas.
Every other signal, NEUTRAL included, is priced as a short: SL above
entry, TP below.
"""

from dataclasses import dataclass

from app.strategy.indicators import safe_number
from app.strategy.models import SignalType


SCALP_RISK_MULTIPLIER = 1.2
SWING_RISK_MULTIPLIER = 1.8

# Floor as a fraction of price; keeps flat markets (ATR ≈ 0) tradeable.
MIN_RISK_FRACTION = 0.001


@dataclass(frozen=True)
class RiskLevels:
    """Computed stop-loss and take-profit for a trade."""

    sl: float
    tp: float
    risk: float


def calculate_risk(price: float, atr: float, is_scalping: bool = False) -> float:
    """Return the stop distance for *price* given the current *atr*."""
    multiplier = SCALP_RISK_MULTIPLIER if is_scalping else SWING_RISK_MULTIPLIER
    return max(safe_number(atr) * multiplier, safe_number(price) * MIN_RISK_FRACTION)


def calculate_risk_levels(
    price: float,
    signal: SignalType,
    atr: float,
    rr_ratio: float = 2.0,
    is_scalping: bool = False,
) -> RiskLevels:
    """Calculate SL and TP around *price* for *signal*.

    Args:
        price: Entry price (last close).
        signal: Classified signal; decides which side SL/TP go.
        atr: Current ATR(14) value.
        rr_ratio: Reward multiple of risk used to place TP.
        is_scalping: Tighter ATR multiplier (1.2 instead of 1.8).

    Returns:
        ``RiskLevels`` with sl and tp rounded to 5 decimal places.
    """
    price = safe_number(price)
    rr_ratio = safe_number(rr_ratio, 2.0)
    risk = calculate_risk(price, atr, is_scalping)

    if signal.is_buy:
        sl = price - risk
        tp = price + risk * rr_ratio
    else:
        sl = price + risk
        tp = price - risk * rr_ratio

    return RiskLevels(sl=round(sl, 5), tp=round(tp, 5), risk=risk)
