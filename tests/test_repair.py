"""
Unit tests for amount, price and date repair rules.
"""

import datetime

import pandas as pd
import pytest

from warehouse_pipeline.repair import (
    null_future_dates,
    parse_yyyymmdd,
    repair_price,
    repair_sales_amount,
)


@pytest.fixture
def raw_sales():
    """sales, quantity, price as delivered by the CRM."""
    return (
        pd.Series([None, -5, 30, 20, 40, 25, 10, 10]),
        pd.Series([2, 2, 2, 2, 1, 2, 0, 0]),
        pd.Series([10, 10, 10, -10, None, None, None, 5]),
    )


def _repair(sales, quantity, price):
    repaired_sales = repair_sales_amount(sales, quantity, price)
    return repaired_sales, repair_price(price, repaired_sales, quantity)


class TestRepairSalesAmount:
    def test_recomputes_missing_negative_and_inconsistent_amounts(self, raw_sales):
        sales, quantity, price = raw_sales
        result = repair_sales_amount(sales, quantity, price)
        assert result[:4].tolist() == [20, 20, 20, 20]

    def test_keeps_amount_when_price_unknown(self, raw_sales):
        sales, quantity, price = raw_sales
        result = repair_sales_amount(sales, quantity, price)
        assert result[4] == 40
        assert result[5] == 25

    def test_zero_quantity_with_known_price(self, raw_sales):
        sales, quantity, price = raw_sales
        result = repair_sales_amount(sales, quantity, price)
        assert result[7] == 0

    def test_consistent_row_left_unchanged(self):
        result = repair_sales_amount(pd.Series([30]), pd.Series([3]), pd.Series([10]))
        assert result.tolist() == [30]


class TestRepairPrice:
    def test_back_derives_missing_and_non_positive_prices(self):
        result = repair_price(
            pd.Series([None, -10, 15]),
            pd.Series([20, 20, 30]),
            pd.Series([2, 2, 2]),
        )
        assert result.tolist() == [10, 10, 15]

    def test_zero_quantity_yields_missing_price(self):
        result = repair_price(pd.Series([None, 0]), pd.Series([20, 20]), pd.Series([0, None]))
        assert result.isna().all()

    def test_uses_repaired_amount(self, raw_sales):
        sales, quantity, price = raw_sales
        _, repaired_price = _repair(sales, quantity, price)
        assert repaired_price[3] == 10
        assert repaired_price[4] == 40
        assert repaired_price[5] == 12.5


class TestRepairProperties:
    def test_repair_is_idempotent(self, raw_sales):
        sales, quantity, price = raw_sales
        once_sales, once_price = _repair(sales, quantity, price)
        twice_sales, twice_price = _repair(once_sales, quantity, once_price)
        pd.testing.assert_series_equal(once_sales, twice_sales)
        pd.testing.assert_series_equal(once_price, twice_price)

    def test_amount_consistent_unless_raw_amount_was_valid(self, raw_sales):
        sales, quantity, price = raw_sales
        repaired_sales, repaired_price = _repair(sales, quantity, price)
        for i in range(len(sales)):
            consistent = repaired_sales[i] == quantity[i] * abs(repaired_price[i])
            kept = repaired_sales[i] == sales[i] and sales[i] > 0
            assert consistent or kept, f"row {i}"


class TestParseYyyymmdd:
    def test_valid_date_passes_through(self):
        result = parse_yyyymmdd(pd.Series([20231022]))
        assert result[0] == pd.Timestamp("2023-10-22")

    def test_zero_and_wrong_length_become_missing(self):
        result = parse_yyyymmdd(pd.Series([0, 202310, 2023102201]))
        assert result.isna().all()

    def test_eight_digits_the_parser_rejects_become_missing(self):
        result = parse_yyyymmdd(pd.Series([20231301, 20230230]))
        assert result.isna().all()

    def test_missing_and_text_values(self):
        result = parse_yyyymmdd(pd.Series([None, "20231022", "2023-10-22", -2023101]))
        assert pd.isna(result[0])
        assert result[1] == pd.Timestamp("2023-10-22")
        assert pd.isna(result[2])
        assert pd.isna(result[3])

    def test_returns_datetimes(self):
        result = parse_yyyymmdd(pd.Series([20231022, 0]))
        assert pd.api.types.is_datetime64_any_dtype(result)


class TestNullFutureDates:
    def test_future_dates_become_missing(self):
        dates = pd.Series(pd.to_datetime(["1970-01-01", "2099-01-01", None]))
        result = null_future_dates(dates, as_of=datetime.date(2024, 1, 1))
        assert result[0] == pd.Timestamp("1970-01-01")
        assert result[1:].isna().all()

    def test_as_of_date_itself_is_kept(self):
        dates = pd.Series(pd.to_datetime(["2024-01-01"]))
        result = null_future_dates(dates, as_of=datetime.date(2024, 1, 1))
        assert result[0] == pd.Timestamp("2024-01-01")
