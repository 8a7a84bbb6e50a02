"""Internal API routers — /pairs, /settings, /signals, /indicators, /backtest, /profit endpoints.

No business logic. Delegates to the strategy, risk and backtest modules
and to the shared signal history.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.backtest.stats import run_backtest
from app.config import Config
from app.data.candles import candles_from_records
from app.history import SignalHistory
from app.models.requests import BacktestRequest, IndicatorRequest, ProfitRequest, SignalRequest
from app.risk.profit import simulate_profit
from app.strategy.indicators import (
    calculate_bollinger,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
)
from app.strategy.models import SUPPORTED_PAIRS, is_supported_pair
from app.strategy.signals import generate_signal

logger = logging.getLogger("signalforge.api")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_DEFAULT_SETTINGS: dict = {
    "risk_percentage": 1.0,
    "rr_ratio": 2.0,
    "timezone": "UTC",
    "scalping_mode": False,
    "breakout_sensitivity": 1.0,
}

# Live settings — mutable at runtime, seeded from Config
_live_settings: dict = dict(_DEFAULT_SETTINGS)
_history = SignalHistory()


def configure_routers(
    config: Optional[Config] = None,
    history: Optional[SignalHistory] = None,
) -> None:
    """Inject startup state.

    Args:
        config: Seeds the runtime settings; ``None`` resets them to defaults.
        history: Signal history to record into; ``None`` starts a fresh one
            (capped at ``config.history_limit`` when a config is given).
    """
    global _history  # noqa: PLW0603
    _live_settings.clear()
    _live_settings.update(_DEFAULT_SETTINGS)
    if config is not None:
        _live_settings.update(
            risk_percentage=config.risk_percentage,
            rr_ratio=config.rr_ratio,
            timezone=config.timezone,
            scalping_mode=config.scalping_mode,
            breakout_sensitivity=config.breakout_sensitivity,
        )
    if history is not None:
        _history = history
    else:
        _history = SignalHistory(config.history_limit if config else 50)


def get_live_settings() -> dict:
    """Return a copy of the current runtime settings."""
    return dict(_live_settings)


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/pairs")
async def get_pairs():
    """Return the supported instrument catalogue."""
    return {
        "pairs": [
            {"symbol": symbol, "category": category}
            for symbol, category in SUPPORTED_PAIRS.items()
        ]
    }


@router.get("/settings")
async def get_settings():
    """Return current runtime analysis settings."""
    return dict(_live_settings)


@router.post("/settings")
async def post_settings(body: dict):
    """Update runtime analysis settings.

    Validates ranges before applying. Returns updated settings, or the
    list of errors without applying anything.
    """
    errors = []
    updates: dict = {}

    try:
        if "rr_ratio" in body:
            v = float(body["rr_ratio"])
            if not 0.5 <= v <= 10.0:
                errors.append("rr_ratio must be 0.5–10.0")
            else:
                updates["rr_ratio"] = v

        if "breakout_sensitivity" in body:
            v = float(body["breakout_sensitivity"])
            if not 0.1 <= v <= 5.0:
                errors.append("breakout_sensitivity must be 0.1–5.0")
            else:
                updates["breakout_sensitivity"] = round(v, 2)

        if "risk_percentage" in body:
            v = float(body["risk_percentage"])
            if not 0.1 <= v <= 10.0:
                errors.append("risk_percentage must be 0.1–10.0")
            else:
                updates["risk_percentage"] = v
    except (TypeError, ValueError) as exc:
        errors.append(f"invalid number: {exc}")

    if "scalping_mode" in body:
        if not isinstance(body["scalping_mode"], bool):
            errors.append("scalping_mode must be a boolean")
        else:
            updates["scalping_mode"] = body["scalping_mode"]

    if "timezone" in body:
        updates["timezone"] = str(body["timezone"])

    if errors:
        return {"status": "error", "errors": errors}

    _live_settings.update(updates)
    logger.info("Settings updated: %s", _live_settings)
    return {"status": "ok", **_live_settings}


@router.post("/signals")
async def post_signal(body: SignalRequest):
    """Generate a signal for the posted candle window and record it."""
    if not is_supported_pair(body.pair):
        raise HTTPException(status_code=404, detail=f"Unsupported pair '{body.pair}'")

    candles = candles_from_records(c.model_dump() for c in body.candles)
    signal = generate_signal(
        body.pair.upper(),
        body.timeframe,
        candles,
        rr_ratio=body.rr_ratio if body.rr_ratio is not None else _live_settings["rr_ratio"],
        is_scalping=(
            body.is_scalping if body.is_scalping is not None
            else _live_settings["scalping_mode"]
        ),
        breakout_sensitivity=(
            body.breakout_sensitivity if body.breakout_sensitivity is not None
            else _live_settings["breakout_sensitivity"]
        ),
    )
    _history.add(signal)
    logger.info(
        "%s %s: %s (%d%%) entry %.5f",
        signal.pair, signal.timeframe, signal.signal.value,
        signal.confidence, signal.entry,
    )
    return {"signal": signal.to_dict()}


@router.get("/signals/history")
async def get_signal_history(
    limit: int = Query(default=20, ge=1),
):
    """Return recent signals, newest first.

    *limit* may not exceed the history cap.
    """
    if limit > _history.limit:
        raise HTTPException(
            status_code=422,
            detail=f"limit must be at most {_history.limit}",
        )
    return {"signals": [s.to_dict() for s in _history.recent(limit)]}


@router.delete("/signals/history")
async def clear_signal_history():
    """Purge the signal history."""
    cleared = len(_history)
    _history.clear()
    logger.info("Signal history cleared (%d entries)", cleared)
    return {"status": "ok", "cleared": cleared}


@router.post("/indicators")
async def post_indicators(body: IndicatorRequest):
    """Return indicator series for the posted closing prices."""
    bands = calculate_bollinger(
        body.closes, body.bollinger_period, body.bollinger_multiplier,
    )
    macd = calculate_macd(body.closes)
    return {
        "rsi": calculate_rsi(body.closes, body.rsi_period),
        "ema": {str(p): calculate_ema(body.closes, p) for p in body.ema_periods},
        "bollinger": {"upper": bands.upper, "lower": bands.lower, "sma": bands.sma},
        "macd": {"macd": macd.macd, "signal": macd.signal, "histogram": macd.histogram},
    }


@router.post("/backtest")
async def post_backtest(body: BacktestRequest):
    """Return sample backtest statistics for the dashboard."""
    candles = candles_from_records(c.model_dump() for c in body.candles)
    rr_ratio = body.rr_ratio if body.rr_ratio is not None else _live_settings["rr_ratio"]
    return run_backtest(candles, rr_ratio).to_dict()


@router.post("/profit")
async def post_profit(body: ProfitRequest):
    """Project P&L for a run of fixed-risk trades."""
    projection = simulate_profit(
        balance=body.balance,
        risk_pct=body.risk_pct,
        rr_ratio=body.rr_ratio,
        win_rate_pct=body.win_rate_pct,
        trades=body.trades,
    )
    return {
        "net": round(projection.net, 2),
        "final_balance": round(projection.final_balance, 2),
        "roi_pct": round(projection.roi_pct, 2),
        "wins": projection.wins,
        "losses": projection.losses,
    }
