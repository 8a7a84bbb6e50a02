"""Candle preparation — turns raw OHLCV rows into an ordered candle window.

The signal engine expects an oldest-first sequence with strictly
increasing timestamps.  This module enforces that on the caller side:

1. Coerce OHLCV columns to numbers (unparseable cells become NaN and are
   left for the indicator layer to neutralize).
2. Drop rows without a usable timestamp.
3. Collapse duplicate timestamps to the latest row received.
4. Discard rows that go back in time relative to what came before.

Usage (CLI):
    python -m app.main --mode analyze --csv candles.csv
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from app.strategy.models import CandleData

logger = logging.getLogger("signalforge.data")

REQUIRED_COLUMNS = ["time", "open", "high", "low", "close", "volume"]


def _to_epoch_seconds(series: pd.Series) -> pd.Series:
    """Convert a time column to integer epoch seconds.

    Numeric columns are taken as epoch seconds already; anything else is
    parsed as a datetime string (assumed UTC when naive).
    """
    numeric = pd.to_numeric(series, errors="coerce")
    if numeric.notna().all():
        return numeric
    parsed = pd.to_datetime(series, utc=True, errors="coerce")
    seconds = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)
    return numeric.where(numeric.notna(), seconds)


def prepare_candles(df: pd.DataFrame) -> list[CandleData]:
    """Clean a raw OHLCV DataFrame into an ordered list of ``CandleData``.

    Raises ``ValueError`` if a required column is missing.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing candle column(s): {', '.join(missing)}")

    if df.empty:
        return []

    df = df[REQUIRED_COLUMNS].copy()
    df["time"] = _to_epoch_seconds(df["time"])
    for col in REQUIRED_COLUMNS[1:]:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    before = len(df)
    df = df[df["time"].notna()]

    # Out-of-order rows: anything below the running max of earlier times
    running_max = df["time"].cummax().shift(1)
    df = df[running_max.isna() | (df["time"] >= running_max)]

    # Latest row wins for a repeated timestamp
    df = df.drop_duplicates(subset="time", keep="last")

    dropped = before - len(df)
    if dropped:
        logger.info("Dropped %d of %d candle rows (missing time, duplicate or out of order)",
                    dropped, before)

    return [
        CandleData(
            time=int(row.time),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in df.itertuples(index=False)
    ]


def candles_from_records(records: Iterable[Mapping]) -> list[CandleData]:
    """Build candles from dict-like rows (e.g. a decoded JSON array)."""
    return prepare_candles(pd.DataFrame(list(records), columns=REQUIRED_COLUMNS))


def load_candles_csv(path: str | Path) -> list[CandleData]:
    """Read a CSV with ``time,open,high,low,close,volume`` columns."""
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    candles = prepare_candles(df)
    logger.info("Loaded %d candles from %s", len(candles), path)
    return candles
