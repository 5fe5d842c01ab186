"""CSV output of processed ticker records."""

from __future__ import annotations

import threading
from typing import IO

from tickerfeed.logger import Logger
from tickerfeed.ticker import TickerData

HEADER = (
    "timestamp_microseconds,sequence_number,type,product_id,price,"
    "best_bid,best_ask,mid_price,price_ema,mid_price_ema"
)


class CSVWriter:
    """Writes ticker records to a CSV file, flushing after every row."""

    def __init__(self, filename: str, logger: Logger) -> None:
        self.logger = logger
        self._lock = threading.Lock()
        self._header_written = False
        self._records_written = 0
        try:
            self._file: IO[str] | None = open(filename, "w", encoding="utf-8")
        except OSError as exc:
            logger.error(f"Failed to open CSV file: {filename}")
            raise OSError("Cannot open CSV file") from exc

        self.write_header()
        logger.info(f"CSV writer initialized {filename}")

    def __enter__(self) -> CSVWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def records_written(self) -> int:
        return self._records_written

    def write_header(self) -> None:
        """Write the header line, once."""
        with self._lock:
            if not self._header_written and self._file is not None:
                self._file.write(HEADER + "\n")
                self._file.flush()
                self._header_written = True
                self.logger.debug("CSV header written")

    def write_ticker_data(self, ticker: TickerData) -> None:
        """Append one ticker record."""
        with self._lock:
            if self._file is None:
                return
            self._file.write(ticker.to_csv_row() + "\n")
            self._file.flush()
            self._records_written += 1
            if self._records_written % 25 == 0:
                self.logger.info(
                    f" Record #{self._records_written}"
                    f"written to sequence: {ticker.sequence_number})"
                )

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()
                self.logger.info("Manual flush completed\n")

    def close(self) -> None:
        """Flush and close the file; later writes are ignored."""
        if self._file is None:
            return
        self.flush()
        with self._lock:
            self._file.close()
            self._file = None
        self.logger.info(f"CSV file closed. Total records written: {self._records_written}")