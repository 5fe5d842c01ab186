from datetime import datetime, timedelta, timezone

import pytest

from tickerfeed.ticker import TickerData

STAMP = datetime(2025, 1, 15, 10, 30, 0, 123, tzinfo=timezone.utc)


def make_csv_ticker():
    ticker = TickerData(
        sequence_number=42,
        type="ticker",
        product_id="BTC-USD",
        price=50000.00,
        best_bid=49999.50,
        best_ask=50000.50,
        price_ema=49998.75,
        mid_price_ema=49999.25,
        timestamp=STAMP,
    )
    ticker.calculate_mid_price()
    return ticker


def test_mid_price_calculation():
    ticker = TickerData(best_bid=49999.75, best_ask=50001.25)
    ticker.calculate_mid_price()
    assert ticker.mid_price == pytest.approx(50000.5, abs=0.001)


def test_structure_renderings_contain_fields():
    ticker = TickerData(
        type="ticker",
        product_id="BTC-USD",
        price=50000.50,
        best_bid=49999.75,
        best_ask=50001.25,
        price_ema=49995.25,
        mid_price_ema=49997.50,
        timestamp=datetime.now(timezone.utc),
    )
    ticker.calculate_mid_price()
    csv_row = ticker.to_csv_row()
    log_string = ticker.to_log_string()
    assert "ticker" in csv_row
    assert "BTC-USD" in csv_row
    assert "BTC-USD" in log_string
    assert "Price:" in log_string


def test_csv_formatting():
    csv = make_csv_ticker().to_csv_row()
    assert csv.count(",") == 9
    assert "42" in csv
    assert "ticker" in csv
    assert "BTC-USD" in csv
    assert "50000.00" in csv


def test_csv_row_exact():
    assert make_csv_ticker().to_csv_row() == (
        "2025-01-15 10:30:00.000123,42,ticker,BTC-USD,"
        "50000.00,49999.50,50000.50,50000.00,49998.750000,49999.250000"
    )


def test_log_string_exact():
    assert make_csv_ticker().to_log_string() == (
        "#42 BTC-USD [10:30:00.000123] - Price: $50000.00 | Mid: $50000.00"
        " | Price EMA: $49998.7500 | Mid EMA: $49999.2500"
    )


def test_timestamp_converted_to_utc():
    offset = timezone(timedelta(hours=2))
    ticker = TickerData(timestamp=STAMP.astimezone(offset))
    assert ticker.to_csv_row().startswith("2025-01-15 10:30:00.000123,")


def test_naive_timestamp_taken_as_utc():
    ticker = TickerData(timestamp=STAMP.replace(tzinfo=None))
    assert ticker.to_csv_row().startswith("2025-01-15 10:30:00.000123,")


def test_default_record():
    ticker = TickerData()
    assert ticker.to_csv_row() == (
        "1970-01-01 00:00:00.000000,0,,,0.00,0.00,0.00,0.00,0.000000,0.000000"
    )