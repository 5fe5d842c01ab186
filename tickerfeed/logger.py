"""Thread-safe application logger with a separate test-verification log."""

from __future__ import annotations

import threading
from datetime import datetime
from enum import IntEnum
from typing import IO


class LogLevel(IntEnum):
    """Severity of a log message; higher values are more severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        """Short tag written between brackets in each log line."""
        return _LABELS[self]


_LABELS = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERROR",
}


def _timestamp() -> str:
    """Local time with microsecond precision."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")


def _open_or_none(path: str, mode: str) -> IO[str] | None:
    try:
        return open(path, mode, encoding="utf-8")
    except OSError:
        return None


class Logger:
    """Writes leveled messages to a log file and the console, and test results to a test log."""

    def __init__(
        self,
        log_filename: str = "hft_app.log",
        test_log_filename: str = "test_verification.log",
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        self.min_level = LogLevel(level)
        self._lock = threading.Lock()
        self._log_file = _open_or_none(log_filename, "a")
        self._test_log_file = _open_or_none(test_log_filename, "w")

        if self._log_file is not None:
            self.log(LogLevel.INFO, "=== HFT Application Started ===")

        if self._test_log_file is not None:
            self._test_log_file.write("=== TEST VERIFICATION LOG ===\n")
            self._test_log_file.write(f"Generated at: {_timestamp()}\n")
            self._test_log_file.write("Application: Coinbase HFT Ticker\n")
            self._test_log_file.write("================================\n\n")
            self._test_log_file.flush()

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def log(self, level: LogLevel, message: str) -> None:
        """Write a message if its level is at least the minimum level."""
        if level < self.min_level:
            return
        with self._lock:
            line = f"[{_timestamp()}] [{LogLevel(level).label}] {message}"
            if self._log_file is not None:
                self._log_file.write(line + "\n")
                self._log_file.flush()
            print(line, flush=True)

    def log_test(self, test_name: str, result: str, details: str = "") -> None:
        """Record a test outcome in the test-verification log."""
        with self._lock:
            if self._test_log_file is None:
                return
            line = f"[{_timestamp()}] TEST: {test_name} - {result}"
            if details:
                line += f" | Details: {details}"
            self._test_log_file.write(line + "\n")
            self._test_log_file.flush()

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def close(self) -> None:
        """Write the closing markers and close both files."""
        if self._log_file is not None:
            self.log(LogLevel.INFO, "=== HFT Application Ended ===")
            with self._lock:
                self._log_file.close()
                self._log_file = None

        with self._lock:
            if self._test_log_file is not None:
                self._test_log_file.write("\n=== END OF TEST LOG ===\n")
                self._test_log_file.close()
                self._test_log_file = None