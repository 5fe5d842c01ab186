"""Command-line entry point: stream one product's ticker and record it until stopped."""

from __future__ import annotations

import argparse
import signal
import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from tickerfeed.logger import Logger, LogLevel
from tickerfeed.processor import HFTProcessor

DEFAULT_PRODUCT = "BTC-USD"
DEFAULT_CSV = "ticker_data.csv"
DEFAULT_LOG = "hft_app.log"
DEFAULT_TEST_LOG = "test_verification.log"
STATS_INTERVAL = 30.0

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _positive_seconds(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of seconds: {text}")
    return value


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tickerfeed",
        description="Stream live ticker data, compute moving averages and record them to CSV.",
    )
    parser.add_argument("--product", default=DEFAULT_PRODUCT, help="product to subscribe to")
    parser.add_argument("--csv", default=DEFAULT_CSV, help="CSV output file")
    parser.add_argument("--log-file", default=DEFAULT_LOG, help="application log file")
    parser.add_argument("--test-log", default=DEFAULT_TEST_LOG, help="test verification log file")
    parser.add_argument(
        "--interval",
        type=_positive_seconds,
        default=STATS_INTERVAL,
        help="seconds between periodic statistics",
    )
    parser.add_argument(
        "--duration",
        type=_positive_seconds,
        default=None,
        help="stop after this many seconds (default: run until interrupted)",
    )
    return parser.parse_args(argv)


@contextmanager
def _shutdown_on_signals(stop_event: threading.Event) -> Iterator[None]:
    """Set the event on SIGINT or SIGTERM; restore the previous handlers afterwards."""

    def handler(signum: int, frame: object) -> None:
        print(f"\nReceived signal {signum}. Shutting down...", flush=True)
        stop_event.set()

    previous = {sig: signal.getsignal(sig) for sig in _SIGNALS}
    for sig in _SIGNALS:
        signal.signal(sig, handler)
    try:
        yield
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


def _minutes_since(start: float) -> int:
    return int((time.monotonic() - start) // 60)


def _run(
    args: argparse.Namespace, logger: Logger, stop_event: threading.Event
) -> None:
    product = args.product
    logger.info(f"Initializing HFT processor for {product} trading pair")
    with HFTProcessor(product, logger, csv_filename=args.csv) as processor:
        logger.info("=== APPLICATION STARTUP ===")
        logger.info(f"Product: {product}")
        logger.info("EMA smoothing factor: 0.2 (20%)")
        logger.info("EMA calculation: With every message (Option B)")
        logger.info("Output files:")
        logger.info(f"  - {args.csv} ({product} market data)")
        logger.info(f"  - {args.log_file} (application logs)")
        logger.info(f"  - {args.test_log} (test results)")
        logger.info("Press Ctrl+C for graceful shutdown")
        logger.info("================================")

        logger.info(f"Starting real-time market data processing for {product}...")
        processor.start()

        start = time.monotonic()
        deadline = start + args.duration if args.duration is not None else None
        next_report = start + args.interval
        while not stop_event.is_set():
            now = time.monotonic()
            if deadline is not None and now >= deadline:
                break
            wake = next_report if deadline is None else min(next_report, deadline)
            if stop_event.wait(max(0.0, wake - now)):
                break
            if time.monotonic() >= next_report:
                logger.info(
                    f"Runtime: {_minutes_since(start)} minutes | "
                    f"{product} messages processed: {processor.total_messages_processed} | "
                    f"EMA updates: {processor.ema_updates_count}"
                )
                next_report += args.interval

        logger.info(f"Initiating graceful shutdown for {product}...")
        processor.stop()

        logger.info(f"=== FINAL STATISTICS FOR {product} ===")
        logger.info(f"Total messages processed: {processor.total_messages_processed}")
        logger.info(f"EMA updates performed: {processor.ema_updates_count}")

        total_runtime = _minutes_since(start)
        logger.info(f"Total runtime: {total_runtime} minutes")
        logger.log_test(
            "APPLICATION_RUNTIME",
            "COMPLETED",
            f"Runtime: {total_runtime} minutes, "
            f"{product} messages: {processor.total_messages_processed}",
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the ticker application; return the process exit status."""
    args = _parse_args(argv)
    stop_event = threading.Event()

    with _shutdown_on_signals(stop_event), Logger(
        args.log_file, args.test_log, LogLevel.INFO
    ) as logger:
        logger.info("=== Coinbase HFT Ticker Application ===")
        try:
            _run(args, logger, stop_event)
        except Exception as exc:  # report any failure and exit non-zero
            logger.error(f"Application error: {exc}")
            logger.log_test("APPLICATION_ERROR", "FAILED", str(exc))
            return 1

        logger.info("Application shutdown completed successfully")
        logger.log_test("APPLICATION_SHUTDOWN", "SUCCESS", "Clean shutdown completed")

        print("\n=== Application Summary ===")
        print(f"Check '{args.test_log}' for test results")
        print(f"Check '{args.csv}' for market data")
        print(f"Check '{args.log_file}' for detailed application logs")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())