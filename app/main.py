"""SignalForge — application entry point.

Boots the FastAPI internal server and provides the CLI entry point for
serve and one-shot analyze modes.
"""

import logging

from fastapi import FastAPI

from app.api.routers import router

app = FastAPI(title="SignalForge Internal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("signalforge")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate mode."""
    import argparse

    from app.config import load_config

    parser = argparse.ArgumentParser(description="SignalForge signal engine")
    parser.add_argument(
        "--mode",
        choices=["serve", "analyze"],
        default="serve",
        help="Run the API server or analyze a candle CSV once (default: serve)",
    )
    parser.add_argument("--csv", help="Candle CSV for analyze mode")
    parser.add_argument("--pair", help="Instrument label (default: DEFAULT_PAIR)")
    parser.add_argument("--timeframe", help="Timeframe label (default: DEFAULT_TIMEFRAME)")
    args = parser.parse_args(argv)

    config = load_config()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.mode == "analyze":
        if not args.csv:
            parser.error("--csv is required in analyze mode")
        _run_analyze(config, args.csv, args.pair, args.timeframe)
    else:
        _run_server(config)


def _run_server(config) -> None:
    """Serve the internal API with uvicorn."""
    import uvicorn

    from app.api.routers import configure_routers

    configure_routers(config=config)
    logger.info("Starting SignalForge API on port %d", config.api_port)
    uvicorn.run(app, host="0.0.0.0", port=config.api_port, log_level="info")


def _run_analyze(config, csv_path: str, pair, timeframe) -> None:
    """Generate one signal from a candle CSV and print it as JSON."""
    import json

    from app.data.candles import load_candles_csv
    from app.strategy.signals import generate_signal

    candles = load_candles_csv(csv_path)
    signal = generate_signal(
        pair or config.default_pair,
        timeframe or config.default_timeframe,
        candles,
        **config.signal_params(),
    )
    logger.info(
        "Signal: %s (%d%%), trend %s, breakout=%s",
        signal.signal.value, signal.confidence, signal.trend.value, signal.is_breakout,
    )
    print(json.dumps(signal.to_dict(), indent=2))


if __name__ == "__main__":
    _run_cli()
