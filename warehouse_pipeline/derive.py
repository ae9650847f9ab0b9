"""
Attributes computed from other columns of the product master.
"""
from typing import Tuple

import pandas as pd

from warehouse_pipeline.normalize import to_object

# Composite product keys look like "CO-RF-FR-R92B-58": the first five
# characters name the category, the rest (after the separator) the product.
CATEGORY_WIDTH = 5
PRODUCT_KEY_OFFSET = 6

_ROW_ORDER = "_row_order"


def split_product_key(series: pd.Series) -> Tuple[pd.Series, pd.Series]:
    """
    Split composite product keys into category id and clean product key.

    Returns:
        Tuple of (category ids with '-' replaced by '_', product keys)
    """
    text = series.astype("string")
    category = text.str.slice(0, CATEGORY_WIDTH).str.replace("-", "_", regex=False)
    product = text.str.slice(PRODUCT_KEY_OFFSET)
    return to_object(category), to_object(product)


def chain_end_dates(frame: pd.DataFrame, key: str, start: str, tiebreak: str) -> pd.Series:
    """
    Derive validity end dates for versioned records.

    Versions of one key are ordered by ``start`` (missing dates last), then
    ``tiebreak``, then input position. Each version ends the day before the
    next version starts; the last version stays open (NaT). Versions sharing
    a start date are not merged, so the first of them ends the day before its
    own start.

    Args:
        frame: Records with a unique index
        key: Column grouping the versions
        start: Start date column (datetime64)
        tiebreak: Column ordering versions with equal start dates

    Returns:
        End dates aligned with ``frame``'s index
    """
    ordered = frame.assign(**{_ROW_ORDER: range(len(frame))}).sort_values(
        [key, start, tiebreak, _ROW_ORDER],
        na_position="last",
        kind="mergesort",
    )
    next_start = ordered.groupby(key, dropna=False, sort=False)[start].shift(-1)
    return (next_start - pd.Timedelta(days=1)).reindex(frame.index)
