import signal
import threading
from unittest import mock

import pytest

from tickerfeed.app import main

TICKER_JSON = (
    '{"type": "ticker", "product_id": "BTC-USD", "price": "50000.00",'
    ' "best_bid": "49999.00", "best_ask": "50001.00",'
    ' "time": "2025-01-15T10:30:00.000000Z"}'
)


class FakeApp:
    """Stands in for a live connection: delivers one ticker, then waits to be closed."""

    def __init__(self, url, **callbacks):
        self.url = url
        self.callbacks = callbacks
        self._closed = threading.Event()

    def run_forever(self):
        self.callbacks["on_message"](self, TICKER_JSON)
        self._closed.wait(10)

    def close(self):
        self._closed.set()

    def send(self, data):
        return len(data)


@pytest.fixture
def fake_feed():
    with mock.patch("websocket.WebSocketApp", FakeApp):
        yield


def _paths(tmp_path):
    return {
        "csv": tmp_path / "ticker_data.csv",
        "log": tmp_path / "hft_app.log",
        "test_log": tmp_path / "test_verification.log",
    }


def _args(paths, *extra):
    return [
        "--csv", str(paths["csv"]),
        "--log-file", str(paths["log"]),
        "--test-log", str(paths["test_log"]),
        *extra,
    ]


def test_unwritable_csv_reports_error(tmp_path):
    paths = _paths(tmp_path)
    paths["csv"] = tmp_path / "missing" / "ticker_data.csv"
    assert main(_args(paths)) == 1
    test_log = paths["test_log"].read_text(encoding="utf-8")
    assert "TEST: APPLICATION_ERROR - FAILED | Details: Cannot open CSV file" in test_log
    assert "APPLICATION_SHUTDOWN" not in test_log
    assert "Application error: Cannot open CSV file" in paths["log"].read_text(encoding="utf-8")


def test_timed_run_records_ticker(tmp_path, fake_feed):
    paths = _paths(tmp_path)
    assert main(_args(paths, "--duration", "0.3", "--interval", "0.1")) == 0

    rows = paths["csv"].read_text(encoding="utf-8").splitlines()
    assert rows[0].startswith("timestamp_microseconds,sequence_number,type,product_id")
    assert len(rows) == 2
    assert ",1,ticker,BTC-USD,50000.00," in rows[1]

    test_log = paths["test_log"].read_text(encoding="utf-8")
    assert "TEST: HFT_PROCESSOR_START - PASSED" in test_log
    assert "TEST: APPLICATION_RUNTIME - COMPLETED" in test_log
    assert "TEST: APPLICATION_SHUTDOWN - SUCCESS | Details: Clean shutdown completed" in test_log

    log = paths["log"].read_text(encoding="utf-8")
    assert "=== FINAL STATISTICS FOR BTC-USD ===" in log
    assert "Total messages processed: 1" in log
    assert "BTC-USD messages processed:" in log


def test_product_option_is_used(tmp_path, fake_feed):
    paths = _paths(tmp_path)
    assert main(_args(paths, "--product", "ETH-USD", "--duration", "0.2")) == 0
    log = paths["log"].read_text(encoding="utf-8")
    assert "Product: ETH-USD" in log
    assert "=== FINAL STATISTICS FOR ETH-USD ===" in log


def test_summary_printed(tmp_path, fake_feed, capsys):
    paths = _paths(tmp_path)
    assert main(_args(paths, "--duration", "0.2")) == 0
    out = capsys.readouterr().out
    assert "=== Application Summary ===" in out
    assert f"Check '{paths['csv']}' for market data" in out


def test_signal_triggers_shutdown_and_handlers_restored(tmp_path, fake_feed, capsys):
    paths = _paths(tmp_path)
    before = signal.getsignal(signal.SIGTERM)
    timer = threading.Timer(0.3, signal.raise_signal, args=(signal.SIGTERM,))
    timer.start()
    try:
        status = main(_args(paths, "--duration", "10", "--interval", "5"))
    finally:
        timer.cancel()
    assert status == 0
    assert f"Received signal {int(signal.SIGTERM)}. Shutting down..." in capsys.readouterr().out
    assert signal.getsignal(signal.SIGTERM) == before
    assert "Initiating graceful shutdown for BTC-USD..." in paths["log"].read_text(encoding="utf-8")


@pytest.mark.parametrize("option", ["--duration", "--interval"])
@pytest.mark.parametrize("value", ["-1", "0", "abc"])
def test_bad_seconds_rejected(tmp_path, option, value):
    paths = _paths(tmp_path)
    with pytest.raises(SystemExit) as info:
        main(_args(paths, option, value))
    assert info.value.code == 2
    assert not paths["csv"].exists()