"""Signal history — capped, newest-first log of generated signals.

In-memory only; the dashboard persists it on its own side.
"""

from collections import deque

from app.strategy.models import TradingSignal


DEFAULT_HISTORY_LIMIT = 50


class SignalHistory:
    """Keeps the most recent *limit* signals, newest first."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        self._signals: deque[TradingSignal] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._signals.maxlen

    def add(self, signal: TradingSignal) -> None:
        """Record *signal*; the oldest entry drops out once the cap is hit."""
        self._signals.appendleft(signal)

    def recent(self, limit: int | None = None) -> list[TradingSignal]:
        """Return up to *limit* signals, newest first."""
        signals = list(self._signals)
        if limit is None:
            return signals
        return signals[:max(limit, 0)]

    def clear(self) -> None:
        self._signals.clear()

    def __len__(self) -> int:
        return len(self._signals)
