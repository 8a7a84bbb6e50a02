"""Profit projection — pure math, no I/O.

Projects the outcome of a run of fixed-risk trades at a given win rate
and risk-reward ratio.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ProfitProjection:
    """Projected result of a series of trades."""

    net: float
    final_balance: float
    roi_pct: float
    wins: int
    losses: int


def simulate_profit(
    balance: float,
    risk_pct: float,
    rr_ratio: float,
    win_rate_pct: float,
    trades: int,
) -> ProfitProjection:
    """Project the P&L of *trades* fixed-risk trades.

    Formula::

        risk_amount = balance × (risk_pct / 100)
        win_amount  = risk_amount × rr_ratio
        wins        = floor(trades × win_rate_pct / 100)
        net         = wins × win_amount − (trades − wins) × risk_amount

    Args:
        balance: Starting account balance (e.g. 1_000.0).
        risk_pct: Percentage of balance risked per trade (e.g. 1.0).
        rr_ratio: Reward multiple of the risk on a winning trade.
        win_rate_pct: Expected win rate in percent (0–100).
        trades: Number of trades in the run.

    Returns:
        ``ProfitProjection`` with net P&L, final balance and ROI in percent.

    Raises:
        ValueError: If an input is out of range.
    """
    if balance <= 0:
        raise ValueError(f"balance must be positive, got {balance}")
    if risk_pct < 0:
        raise ValueError(f"risk_pct must be non-negative, got {risk_pct}")
    if rr_ratio < 0:
        raise ValueError(f"rr_ratio must be non-negative, got {rr_ratio}")
    if not 0 <= win_rate_pct <= 100:
        raise ValueError(f"win_rate_pct must be 0–100, got {win_rate_pct}")
    if trades < 0:
        raise ValueError(f"trades must be non-negative, got {trades}")

    risk_amount = balance * (risk_pct / 100.0)
    win_amount = risk_amount * rr_ratio
    wins = math.floor(trades * (win_rate_pct / 100.0))
    losses = trades - wins
    net = wins * win_amount - losses * risk_amount

    return ProfitProjection(
        net=net,
        final_balance=balance + net,
        roi_pct=(net / balance) * 100.0,
        wins=wins,
        losses=losses,
    )
