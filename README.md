# tickerfeed

tickerfeed connects to the Coinbase Exchange WebSocket feed
(`wss://ws-feed.exchange.coinbase.com`) and subscribes to the ticker channel
for one product (BTC-USD by default). For every ticker message it:

- computes the mid price as the average of the best bid and the best ask,
- updates an exponential moving average of the price and one of the mid price
  (smoothing factor 0.2; the first value seeds each average),
- gives the record a sequence number starting at 1 and appends it to a CSV file.

If the connection drops, the client connects again after a second until it is
stopped.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Running

```
tickerfeed
```

It runs until it receives Ctrl+C (SIGINT) or SIGTERM, then shuts down cleanly
and logs its final statistics. Options:

| Option            | Default                 | Meaning                                          |
|-------------------|-------------------------|--------------------------------------------------|
| `--product`       | `BTC-USD`               | product to subscribe to                          |
| `--csv`           | `ticker_data.csv`       | CSV output file (overwritten on each run)        |
| `--log-file`      | `hft_app.log`           | application log (appended to)                    |
| `--test-log`      | `test_verification.log` | log of pass/fail and lifecycle records (overwritten) |
| `--interval`      | `30`                    | seconds between periodic statistics lines        |
| `--duration`      | none                    | stop after this many seconds                     |

`--interval` and `--duration` must be positive. Log lines at INFO and above are
also printed to the console. The command exits with status 1 if the run fails
with an error, 0 otherwise.

Example:

```
tickerfeed --product ETH-USD --csv eth.csv --duration 120
```

The CSV header is:

```
timestamp_microseconds,sequence_number,type,product_id,price,best_bid,best_ask,mid_price,price_ema,mid_price_ema
```

The timestamp is the UTC time the message was parsed, with microseconds.
Prices and the mid price have two decimal places; the EMAs have six.

## Using the pieces as a library

```python
from tickerfeed.ema import EMACalculator
from tickerfeed.logger import Logger
from tickerfeed.json_parser import JSONParser

ema = EMACalculator(0.2)
ema.update(100.0)   # 100.0
ema.update(110.0)   # 102.0

with Logger("app.log", "checks.log") as logger:
    parser = JSONParser(logger)
    ticker = parser.parse_ticker_message(
        '{"type": "ticker", "product_id": "BTC-USD", "price": "50000.00",'
        ' "best_bid": "49999.00", "best_ask": "50001.00"}'
    )
    print(ticker.mid_price)        # 50000.0
    print(ticker.to_csv_row())
```

- `tickerfeed.ema.EMACalculator(smoothing_factor=0.2)` raises `ValueError`
  unless the factor is greater than 0 and at most 1. It has `update`, `reset`
  and the read-only `alpha`, `current_ema` and `initialized`.
- `tickerfeed.ticker.TickerData` is a dataclass with `to_csv_row`,
  `to_log_string` and `calculate_mid_price`.
- `tickerfeed.json_parser.JSONParser.parse_ticker_message` raises
  `TickerParseError` (a `ValueError`) for malformed JSON or a message that is
  not a ticker. Prices may be given as strings or numbers.
- `tickerfeed.logger.Logger` has `log`, `debug`, `info`, `warning`, `error`,
  `log_test` and `close`; `LogLevel` sets the minimum level.
- `tickerfeed.csv_writer.CSVWriter` writes the header once and flushes after
  every row; `records_written` counts rows.
- `tickerfeed.websocket_client.WebSocketClient` runs the connection in a
  background thread (`start`, `stop`), passes every parsed ticker to the
  function given to `set_data_callback`, and exposes `handle_message` and
  `subscription_message` for feeding messages in directly.
- `tickerfeed.processor.HFTProcessor` joins the client, the two EMA
  calculators and the CSV writer; `process_ticker_data` handles one ticker at a
  time.

## What it does not do

tickerfeed only records the public ticker channel. It does not place orders,
authenticate, read order books or historical data, or run any checks of its
own at startup.

## Tests

```
pytest
```