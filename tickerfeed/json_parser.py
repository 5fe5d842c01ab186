"""Parsing of ticker messages from the exchange feed."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any

from tickerfeed.logger import Logger
from tickerfeed.ticker import TickerData

_REQUIRED_FIELDS = ("type", "product_id", "price", "best_bid", "best_ask")
_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class TickerParseError(ValueError):
    """A message could not be turned into a ticker record."""


def _reject_constant(name: str) -> float:
    raise ValueError(f"Invalid JSON constant: {name}")


def _string_to_float(text: str) -> float:
    """Read the leading number of a string, ignoring anything after it."""
    match = _NUMBER_PREFIX.match(text)
    if match:
        return float(match.group(1))
    try:
        return float(text.strip())
    except ValueError:
        raise ValueError(f"Cannot convert {text!r} to a number") from None


def _parse_price(data: dict[str, Any], name: str) -> float:
    value = data.get(name)
    if isinstance(value, str):
        return _string_to_float(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _parse_string(data: dict[str, Any], name: str) -> str:
    if name not in data:
        return ""
    value = data[name]
    if not isinstance(value, str):
        raise TypeError(f"Field {name!r} is not a string")
    return value


class JSONParser:
    """Turns raw feed messages into TickerData records."""

    def __init__(self, logger: Logger) -> None:
        self.logger = logger

    def parse_ticker_message(self, json_string: str) -> TickerData:
        """Parse a ticker message; raise TickerParseError if it is not one."""
        try:
            data = json.loads(json_string, parse_constant=_reject_constant)
            if not self.validate_ticker_json(data):
                raise TickerParseError("Invalid ticker JSON structure")
            ticker = TickerData(
                type=_parse_string(data, "type"),
                product_id=_parse_string(data, "product_id"),
                price=_parse_price(data, "price"),
                best_bid=_parse_price(data, "best_bid"),
                best_ask=_parse_price(data, "best_ask"),
                time=_parse_string(data, "time"),
                timestamp=datetime.now(timezone.utc),
            )
            ticker.calculate_mid_price()
            return ticker
        except (ValueError, TypeError) as exc:
            self.logger.error(f"JSON parsing failed: {exc}")
            if isinstance(exc, TickerParseError):
                raise
            raise TickerParseError(str(exc)) from exc

    def validate_ticker_json(self, data: Any) -> bool:
        """Whether the decoded message has every ticker field and type 'ticker'."""
        return (
            isinstance(data, dict)
            and all(name in data for name in _REQUIRED_FIELDS)
            and data["type"] == "ticker"
        )