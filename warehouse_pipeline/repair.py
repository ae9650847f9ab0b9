"""
Repair rules for invalid numeric and date values.

A bad value is never an error here: every rule resolves it to a recomputed
value or to a missing value (NaN / NaT).
"""
import datetime
from typing import Optional

import pandas as pd

DATE_DIGITS = 8


def repair_sales_amount(sales: pd.Series, quantity: pd.Series, price: pd.Series) -> pd.Series:
    """
    Recompute sales amounts that are missing, non-positive or inconsistent.

    The expected amount is ``quantity * |price|``. A recorded amount is
    replaced by it when the amount is missing or <= 0, or when both quantity
    and price are known and the amount differs from their product.
    """
    sales = pd.to_numeric(sales, errors="coerce")
    expected = pd.to_numeric(quantity, errors="coerce") * pd.to_numeric(price, errors="coerce").abs()
    invalid = sales.isna() | (sales <= 0) | (expected.notna() & (sales != expected))
    return sales.mask(invalid, expected)


def repair_price(price: pd.Series, sales: pd.Series, quantity: pd.Series) -> pd.Series:
    """
    Back-derive prices that are missing or non-positive.

    ``sales`` should be the already repaired amount. A quantity of zero (or a
    missing quantity) leaves the price missing instead of dividing by zero.
    """
    price = pd.to_numeric(price, errors="coerce")
    quantity = pd.to_numeric(quantity, errors="coerce")
    derived = pd.to_numeric(sales, errors="coerce") / quantity.where(quantity != 0)
    invalid = price.isna() | (price <= 0)
    return price.mask(invalid, derived)


def parse_yyyymmdd(series: pd.Series) -> pd.Series:
    """
    Parse integer dates written as YYYYMMDD.

    Only non-zero values rendering as exactly eight digits are parsed. The
    check is on shape only: an eight digit value the date parser rejects
    (month 13, day 32, ...) still ends up missing, everything else that
    fails the shape check as well.

    Returns:
        datetime64 Series, NaT where the value is not a valid date
    """
    numeric = pd.to_numeric(series, errors="coerce")
    whole = numeric.notna() & (numeric % 1 == 0) & (numeric.abs() < 10 ** DATE_DIGITS)
    digits = numeric.where(whole).astype("Int64").astype("string")
    shaped = whole & (numeric != 0) & (digits.str.len() == DATE_DIGITS).fillna(False).astype(bool)
    return pd.to_datetime(digits.where(shaped), format="%Y%m%d", errors="coerce")


def null_future_dates(series: pd.Series, as_of: Optional[datetime.date] = None) -> pd.Series:
    """
    Blank out dates later than ``as_of`` (default: today).
    """
    cutoff = pd.Timestamp(as_of or datetime.date.today())
    dates = pd.to_datetime(series, errors="coerce")
    return dates.mask(dates > cutoff)
