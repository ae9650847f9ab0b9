import pandas as pd

_ROW_ORDER = "_row_order"


def latest_per_key(frame: pd.DataFrame, key: str, order_by: str) -> pd.DataFrame:
    """
    Keep the most recent record for every business key.

    Records are sorted by ``order_by`` descending (missing timestamps last)
    with ties broken by input position, so among equally recent records the
    one read first wins. Records without a key are dropped.

    Args:
        frame: Raw records, possibly several per key
        key: Business key column
        order_by: Creation timestamp column

    Returns:
        One record per distinct key, surviving records kept in input order
    """
    keyed = frame[frame[key].notna()].assign(**{_ROW_ORDER: range(int(frame[key].notna().sum()))})
    ranked = keyed.sort_values(
        [order_by, _ROW_ORDER],
        ascending=[False, True],
        na_position="last",
        kind="mergesort",
    )
    latest = ranked.drop_duplicates(subset=[key], keep="first")
    return latest.sort_values(_ROW_ORDER, kind="mergesort").drop(columns=_ROW_ORDER)
