"""Ticker record and its text renderings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    """Return the moment in UTC; naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass
class TickerData:
    """One ticker update with its derived mid price and moving averages."""

    type: str = ""
    product_id: str = ""
    price: float = 0.0
    best_bid: float = 0.0
    best_ask: float = 0.0
    mid_price: float = 0.0
    time: str = ""
    timestamp: datetime = field(default=_EPOCH)
    price_ema: float = 0.0
    mid_price_ema: float = 0.0
    sequence_number: int = 0

    def to_csv_row(self) -> str:
        """Render as one CSV row (without the trailing newline)."""
        stamp = _as_utc(self.timestamp).strftime("%Y-%m-%d %H:%M:%S.%f")
        return ",".join(
            [
                stamp,
                str(self.sequence_number),
                self.type,
                self.product_id,
                f"{self.price:.2f}",
                f"{self.best_bid:.2f}",
                f"{self.best_ask:.2f}",
                f"{self.mid_price:.2f}",
                f"{self.price_ema:.6f}",
                f"{self.mid_price_ema:.6f}",
            ]
        )

    def to_log_string(self) -> str:
        """Render as a one-line human-readable summary."""
        clock = _as_utc(self.timestamp).strftime("%H:%M:%S.%f")
        return (
            f"#{self.sequence_number} {self.product_id} [{clock}]"
            f" - Price: ${self.price:.2f}"
            f" | Mid: ${self.mid_price:.2f}"
            f" | Price EMA: ${self.price_ema:.4f}"
            f" | Mid EMA: ${self.mid_price_ema:.4f}"
        )

    def calculate_mid_price(self) -> None:
        """Set the mid price to the average of best bid and best ask."""
        self.mid_price = (self.best_bid + self.best_ask) / 2.0