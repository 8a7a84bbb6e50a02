"""Tests for the dashboard backtest summary stub."""

import random

from app.backtest.stats import (
    SAMPLE_EQUITY_CURVE,
    SAMPLE_NET_PROFIT,
    SAMPLE_PROFIT_FACTOR,
    SAMPLE_TOTAL_TRADES,
    run_backtest,
)


class TestBacktestStub:
    def test_fixed_sample_figures(self):
        result = run_backtest([], rr_ratio=2.0, rng=random.Random(1))
        assert result.total_trades == SAMPLE_TOTAL_TRADES == 30
        assert result.profit_factor == SAMPLE_PROFIT_FACTOR
        assert result.net_profit == SAMPLE_NET_PROFIT
        assert result.equity_curve == list(SAMPLE_EQUITY_CURVE)

    def test_win_rate_range(self):
        rng = random.Random(42)
        for _ in range(200):
            result = run_backtest([], rr_ratio=2.0, rng=rng)
            assert 60.0 <= result.win_rate < 70.0

    def test_seeded_rng_is_repeatable(self):
        a = run_backtest([], rr_ratio=2.0, rng=random.Random(7))
        b = run_backtest([], rr_ratio=2.0, rng=random.Random(7))
        assert a == b

    def test_to_dict(self):
        data = run_backtest([], rr_ratio=2.0, rng=random.Random(3)).to_dict()
        assert set(data) == {"totalTrades", "winRate", "profitFactor", "netProfit", "equityCurve"}
        assert data["equityCurve"][0] == 10000.0
        assert data["equityCurve"][-1] == 11840.0
