"""Streaming client for the exchange ticker feed."""

from __future__ import annotations

import json
import threading
from typing import Any, Callable, Optional

import websocket

from tickerfeed.json_parser import JSONParser
from tickerfeed.logger import Logger
from tickerfeed.ticker import TickerData

FEED_URL = "wss://ws-feed.exchange.coinbase.com"

_SUBSCRIPTION_MARKER = '"type":"subscriptions"'
_SUBSCRIBE_DELAY = 1.0
_RECONNECT_DELAY = 1.0
_JOIN_TIMEOUT = 5.0

DataCallback = Callable[[TickerData], Any]


class WebSocketClient:
    """Connects to the feed, subscribes to one product's ticker and dispatches parsed updates."""

    def __init__(self, product: str, logger: Logger, url: str = FEED_URL) -> None:
        self.logger = logger
        self.product_id = product
        self.url = url
        self._parser = JSONParser(logger)
        self._callback: Optional[DataCallback] = None
        self._running = False
        self._connected = False
        self._messages_received = 0
        self._parse_errors = 0
        self._stop_event = threading.Event()
        self._app_lock = threading.Lock()
        self._app: Optional[websocket.WebSocketApp] = None
        self._thread: Optional[threading.Thread] = None

        logger.info(f"WebSocket client initialized for product: {product}")
        logger.info(f"Using WebSocket URL: {url}")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def messages_received(self) -> int:
        return self._messages_received

    @property
    def parse_errors(self) -> int:
        return self._parse_errors

    def set_data_callback(self, callback: Optional[DataCallback]) -> None:
        """Set the function that receives every parsed ticker update."""
        self._callback = callback

    def start(self) -> None:
        """Connect in a background thread, reconnecting until stopped."""
        if self._running:
            self.logger.warning("WebSocket client is already running")
            return
        self._running = True
        self._stop_event.clear()
        self.logger.info("Starting WebSocket connection to Coinbase Exchange")
        self._thread = threading.Thread(
            target=self._run, name=f"feed-{self.product_id}", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Close the connection and wait for the background thread to finish."""
        if not self._running:
            return
        self._running = False
        self._connected = False
        self._stop_event.set()

        with self._app_lock:
            app, self._app = self._app, None
        if app is not None:
            app.close()

        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(_JOIN_TIMEOUT)

        self.logger.info("WebSocket client stopped")
        self.logger.info(
            f"Final statistics - Messages received: {self._messages_received}"
            f", Parse errors: {self._parse_errors}"
        )

    def subscription_message(self) -> str:
        """The compact JSON request that subscribes to this product's ticker channel."""
        request = {
            "type": "subscribe",
            "product_ids": [self.product_id],
            "channels": ["ticker"],
        }
        return json.dumps(request, separators=(",", ":"), sort_keys=True)

    def handle_message(self, message: str) -> Optional[TickerData]:
        """Process one raw feed message; return the parsed ticker, if it was one."""
        self._messages_received += 1
        count = self._messages_received
        try:
            if count <= 3:
                self.logger.info(f"Message #{count}: {message}")

            if _SUBSCRIPTION_MARKER in message:
                self.logger.info("Received subscription confirmation!")
                self.logger.log_test(
                    "SUBSCRIPTION_CONFIRMED", "PASSED", "Coinbase confirmed subscription"
                )
                return None

            ticker = self._parser.parse_ticker_message(message)

            if ticker.type == "ticker" and self._callback is not None:
                self.logger.info(
                    f"Processing ticker: {ticker.product_id}"
                    f" - Price: ${ticker.price:.6f}"
                    f" - Mid: ${ticker.mid_price:.6f}"
                )
                self._callback(ticker)
            elif ticker.type and ticker.type != "ticker":
                self.logger.info(f"Received message type: {ticker.type}")

            if count % 25 == 0:
                self.logger.info(f"Progress: {count} messages processed")
                self.logger.log_test(
                    "MESSAGE_PROCESSING", "PASSED", f"Processed {count} messages"
                )
            return ticker

        except Exception as exc:  # any failure on one message must not end the stream
            self._parse_errors += 1
            self.logger.debug(f"Parse error: {exc}")
            if self._parse_errors <= 3:
                self.logger.debug(f"Problematic message: {message[:200]}...")
            if self._parse_errors % 10 == 0:
                self.logger.log_test(
                    "PARSE_ERRORS", "WARNING", f"Total parse errors: {self._parse_errors}"
                )
            return None

    def _run(self) -> None:
        while not self._stop_event.is_set():
            app = websocket.WebSocketApp(
                self.url,
                on_open=self._on_open,
                on_message=self._on_message,
                on_error=self._on_error,
                on_close=self._on_close,
                on_ping=self._on_ping,
                on_pong=self._on_pong,
                on_cont_message=self._on_fragment,
            )
            with self._app_lock:
                self._app = app
            if self._stop_event.is_set():
                break
            app.run_forever()
            self._stop_event.wait(_RECONNECT_DELAY)

    def _on_open(self, ws: Any) -> None:
        self._connected = True
        self.logger.info("WebSocket connection opened successfully!")
        self.logger.log_test(
            "WEBSOCKET_CONNECTION", "PASSED", "Connected to ws-feed.exchange.coinbase.com"
        )
        self._stop_event.wait(_SUBSCRIBE_DELAY)
        self._subscribe(ws)

    def _on_message(self, ws: Any, message: Any) -> None:
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        self.logger.debug(f"Received message: {message[:100]}...")
        self.handle_message(message)

    def _on_close(self, ws: Any, code: Any, reason: Any) -> None:
        self._connected = False
        code = code if code is not None else 0
        reason = reason if reason is not None else ""
        if isinstance(reason, bytes):
            reason = reason.decode("utf-8", errors="replace")
        self.logger.info(f"WebSocket connection closed - Code: {code}, Reason: {reason}")
        self.logger.log_test("WEBSOCKET_DISCONNECT", "INFO", f"Code: {code}, Reason: {reason}")

    def _on_error(self, ws: Any, error: Any) -> None:
        status = getattr(error, "status_code", 0) or 0
        self.logger.error(f"WebSocket error: {error}")
        self.logger.error(f"HTTP Status: {status}")
        self.logger.log_test("WEBSOCKET_ERROR", "FAILED", f"HTTP: {status} - {error}")

    def _on_ping(self, ws: Any, data: Any) -> None:
        self.logger.debug("WebSocket ping received")

    def _on_pong(self, ws: Any, data: Any) -> None:
        self.logger.debug("WebSocket pong received")

    def _on_fragment(self, ws: Any, data: Any, flag: Any) -> None:
        self.logger.debug("WebSocket fragment received")

    def _subscribe(self, ws: Any) -> None:
        self.logger.info(f"Sending subscription request for {self.product_id}...")
        request = self.subscription_message()
        self.logger.info(f"Subscription message: {request}")
        try:
            ws.send(request)
        except (websocket.WebSocketException, OSError):
            self.logger.error("Failed to send subscription message")
            self.logger.log_test("TICKER_SUBSCRIPTION", "FAILED", "Failed to send subscription")
        else:
            self.logger.info("Subscription message sent successfully!")
            self.logger.info(f"Payload size: {len(request.encode('utf-8'))} bytes")
            self.logger.log_test(
                "TICKER_SUBSCRIPTION", "PASSED", f"Subscribed to {self.product_id}"
            )
        self.logger.info("Waiting for ticker data...")