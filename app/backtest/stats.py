"""Backtest summary for the dashboard.

This is a display stub, not a simulation: the candle window is not
replayed.  The win rate is jittered around 65% and the remaining figures
are fixed sample values.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from app.strategy.models import CandleData

logger = logging.getLogger("signalforge.backtest")


SAMPLE_TOTAL_TRADES = 30
SAMPLE_PROFIT_FACTOR = 2.2
SAMPLE_NET_PROFIT = 1840.0
SAMPLE_EQUITY_CURVE = (10000.0, 10250.0, 10180.0, 10500.0, 10950.0, 11840.0)


@dataclass(frozen=True)
class BacktestResult:
    total_trades: int
    win_rate: float
    profit_factor: float
    net_profit: float
    equity_curve: list[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalTrades": self.total_trades,
            "winRate": self.win_rate,
            "profitFactor": self.profit_factor,
            "netProfit": self.net_profit,
            "equityCurve": list(self.equity_curve),
        }


def run_backtest(
    candles: Sequence[CandleData],
    rr_ratio: float,
    rng: Optional[random.Random] = None,
) -> BacktestResult:
    """Return sample backtest statistics for *candles*.

    Args:
        candles: Candle window the dashboard is showing (not replayed).
        rr_ratio: Risk-reward setting (not used by the stub).
        rng: Random source for the win-rate jitter; defaults to a
            fresh unseeded ``random.Random``.

    Returns:
        ``BacktestResult`` with ``win_rate`` in ``[60, 70)``.
    """
    rng = rng or random.Random()
    win_rate = 65.0 + (rng.random() * 10.0 - 5.0)
    logger.debug(
        "Backtest stub for %d candles (rr %.2f): win rate %.1f%%",
        len(candles), rr_ratio, win_rate,
    )
    return BacktestResult(
        total_trades=SAMPLE_TOTAL_TRADES,
        win_rate=win_rate,
        profit_factor=SAMPLE_PROFIT_FACTOR,
        net_profit=SAMPLE_NET_PROFIT,
        equity_curve=list(SAMPLE_EQUITY_CURVE),
    )
