"""Real-time processing of ticker updates: moving averages and CSV output."""

from __future__ import annotations

import dataclasses
import threading

from tickerfeed.csv_writer import CSVWriter
from tickerfeed.ema import EMACalculator
from tickerfeed.logger import Logger
from tickerfeed.ticker import TickerData
from tickerfeed.websocket_client import WebSocketClient

SMOOTHING_FACTOR = 0.2


class HFTProcessor:
    """Feeds each ticker update through price and mid-price EMAs and records it."""

    def __init__(
        self, product_id: str, logger: Logger, csv_filename: str = "ticker_data.csv"
    ) -> None:
        self.logger = logger
        self.product_id = product_id
        self._price_ema = EMACalculator(SMOOTHING_FACTOR)
        self._mid_price_ema = EMACalculator(SMOOTHING_FACTOR)
        self.csv_writer = CSVWriter(csv_filename, logger)
        self.ws_client = WebSocketClient(product_id, logger)
        self._lock = threading.Lock()
        self._running = False
        self._total_processed = 0
        self._ema_updates = 0

        self.ws_client.set_data_callback(self._on_ticker)

        logger.info(f"HFT Processor initialized for: {product_id}")
        logger.log_test("HFT_PROCESSOR_INIT", "PASSED", f"Processor initialized for {product_id}")

    def __enter__(self) -> HFTProcessor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
        self.csv_writer.close()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def total_messages_processed(self) -> int:
        return self._total_processed

    @property
    def ema_updates_count(self) -> int:
        return self._ema_updates

    def start(self) -> None:
        """Start receiving live ticker data."""
        if self._running:
            self.logger.warning("HFT Processor is already running")
            return
        self._running = True
        self.ws_client.start()
        self.logger.info("HFT Processor started")
        self.logger.log_test("HFT_PROCESSOR_START", "PASSED", "Real-time processing started")

    def stop(self) -> None:
        """Stop receiving data and log the final statistics."""
        if not self._running:
            return
        self._running = False
        self.ws_client.stop()
        self._log_statistics()
        self.logger.info("HFT Processor stopped gracefully")
        self.logger.log_test("HFT_PROCESSOR_STOP", "PASSED", "Graceful shutdown completed")

    def process_ticker_data(self, ticker: TickerData) -> None:
        """Number the ticker, fill in its EMAs and write it to the CSV file."""
        with self._lock:
            self._total_processed += 1
            total = self._total_processed
            ticker.sequence_number = total

            ticker.price_ema = self._price_ema.update(ticker.price)
            ticker.mid_price_ema = self._mid_price_ema.update(ticker.mid_price)
            self._ema_updates += 1

            self.csv_writer.write_ticker_data(ticker)

            if total % 25 == 0:
                self.logger.info(ticker.to_log_string())
                self.logger.log_test(
                    "TICKER_PROCESSING",
                    "PASSED",
                    f"Processed {total} tickers with individual EMAs",
                )

            if total % 100 == 0:
                self.logger.info(
                    f"EMA Progress - Sequence #{ticker.sequence_number}"
                    f" | Total calculations: {self._ema_updates}"
                    f" | Current Price EMA: ${ticker.price_ema:.6f}"
                    f" | Current Mid EMA: ${ticker.mid_price_ema:.6f}"
                )

    def _on_ticker(self, ticker: TickerData) -> None:
        self.process_ticker_data(dataclasses.replace(ticker))

    def _log_statistics(self) -> None:
        total = self._total_processed
        updates = self._ema_updates
        records = self.csv_writer.records_written
        self.logger.info("=== FINAL STATISTICS ===")
        self.logger.info(f"Total messages processed: {total}")
        self.logger.info(f"EMA calculations performed: {updates}")
        self.logger.info(f"CSV records written: {records}")
        self.logger.info(f"WebSocket messages received: {self.ws_client.messages_received}")
        self.logger.info(f"Final sequence number: {total}")

        efficiency = updates / total * 100.0 if total > 0 else 0.0
        self.logger.info(f"EMA calculation efficiency: {efficiency:.6f}%")
        self.logger.log_test(
            "FINAL_STATISTICS",
            "INFO",
            f"Messages: {total}, EMAs: {updates}, CSV records: {records}"
            f", Efficiency: {efficiency:.6f}%",
        )