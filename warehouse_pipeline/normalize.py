"""
Field-level cleansing rules.

All functions take and return pandas Series and have no side effects.
Whitespace is trimmed before any comparison and code lookups ignore case.
Missing values come back as None.
"""
from enum import Enum
from typing import Mapping

import pandas as pd

from warehouse_pipeline.models import COUNTRY_CODES, NOT_AVAILABLE


def _text(series: pd.Series) -> pd.Series:
    return series.astype("string")


def to_object(series: pd.Series) -> pd.Series:
    """Convert to plain Python objects with None for missing values."""
    return series.astype(object).where(series.notna(), None)


def _flag(mask: pd.Series) -> pd.Series:
    # nullable comparisons yield <NA> for missing input; treat those as False
    return mask.fillna(False).astype(bool)


def trim_text(series: pd.Series) -> pd.Series:
    """Strip surrounding whitespace."""
    return to_object(_text(series).str.strip())


def map_codes(series: pd.Series, mapping: Mapping[str, Enum], fallback: Enum) -> pd.Series:
    """
    Translate source codes into descriptive labels.

    Args:
        series: Raw code values
        mapping: Upper-case code -> enum member
        fallback: Member used for missing or unmapped codes

    Returns:
        Series of label strings
    """
    labels = {code: member.value for code, member in mapping.items()}
    codes = _text(series).str.strip().str.upper()
    known = _flag(codes.isin(list(labels)))
    return codes.astype(object).map(labels).where(known, fallback.value)


def strip_prefix(series: pd.Series, prefix: str) -> pd.Series:
    """Drop a leading prefix (case-sensitive) where present."""
    text = _text(series)
    prefixed = _flag(text.str.startswith(prefix))
    return to_object(text.where(~prefixed, text.str.slice(len(prefix))))


def remove_hyphens(series: pd.Series) -> pd.Series:
    return to_object(_text(series).str.replace("-", "", regex=False))


def expand_country(series: pd.Series) -> pd.Series:
    """
    Expand country codes to names.

    Known codes become full names, blank or missing values become 'n/a' and
    anything else is kept as a trimmed name.
    """
    names = _text(series).str.strip()
    codes = names.str.upper()
    known = _flag(codes.isin(list(COUNTRY_CODES)))
    blank = names.isna() | _flag(names == "")
    expanded = to_object(names).where(~known, codes.astype(object).map(COUNTRY_CODES))
    return expanded.where(~blank, NOT_AVAILABLE)
