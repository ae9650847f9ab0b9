"""
Unit tests for field cleansing rules.
"""

import pandas as pd

from warehouse_pipeline.models import (
    CRM_GENDER_CODES,
    ERP_GENDER_CODES,
    MARITAL_STATUS_CODES,
    PRODUCT_LINE_CODES,
    Gender,
    MaritalStatus,
    ProductLine,
)
from warehouse_pipeline.normalize import (
    expand_country,
    map_codes,
    remove_hyphens,
    strip_prefix,
    trim_text,
)


class TestTrimText:
    def test_strips_whitespace(self):
        result = trim_text(pd.Series([" Jon ", "Yang", "\tAna\n"]))
        assert result.tolist() == ["Jon", "Yang", "Ana"]

    def test_keeps_missing_values_missing(self):
        result = trim_text(pd.Series([" Jon ", None]))
        assert result[0] == "Jon"
        assert pd.isna(result[1])


class TestMapCodes:
    def test_marital_status(self):
        raw = pd.Series([" s", "M", "m ", "x", None, ""])
        result = map_codes(raw, MARITAL_STATUS_CODES, MaritalStatus.UNKNOWN)
        assert result.tolist() == ["Single", "Married", "Married", "n/a", "n/a", "n/a"]

    def test_crm_gender_ignores_spelled_out_values(self):
        raw = pd.Series(["F", " m", "Female"])
        result = map_codes(raw, CRM_GENDER_CODES, Gender.UNKNOWN)
        assert result.tolist() == ["Female", "Male", "n/a"]

    def test_erp_gender_accepts_spelled_out_values(self):
        raw = pd.Series(["F", "female ", " MALE", "M", "unknown", None])
        result = map_codes(raw, ERP_GENDER_CODES, Gender.UNKNOWN)
        assert result.tolist() == ["Female", "Female", "Male", "Male", "n/a", "n/a"]

    def test_product_line(self):
        raw = pd.Series(["M", "r ", "S", "t", "Z", None])
        result = map_codes(raw, PRODUCT_LINE_CODES, ProductLine.UNKNOWN)
        assert result.tolist() == ["Mountain", "Road", "Other Sales", "Touring", "n/a", "n/a"]

    def test_is_deterministic_and_pure(self):
        raw = pd.Series(["s", "M"])
        first = map_codes(raw, MARITAL_STATUS_CODES, MaritalStatus.UNKNOWN)
        second = map_codes(raw, MARITAL_STATUS_CODES, MaritalStatus.UNKNOWN)
        assert first.tolist() == second.tolist()
        assert raw.tolist() == ["s", "M"]


class TestIdentifierCleanup:
    def test_strip_prefix(self):
        result = strip_prefix(pd.Series(["NASAW00011000", "AW00011001", "nasAW1", None]), "NAS")
        assert result[:3].tolist() == ["AW00011000", "AW00011001", "nasAW1"]
        assert pd.isna(result[3])

    def test_remove_hyphens(self):
        result = remove_hyphens(pd.Series(["AW-00011000", "AW00011001"]))
        assert result.tolist() == ["AW00011000", "AW00011001"]


class TestExpandCountry:
    def test_codes_blanks_and_names(self):
        raw = pd.Series([" DE", "us", "USA", "", "   ", None, " France "])
        result = expand_country(raw)
        assert result.tolist() == [
            "Germany",
            "United States",
            "United States",
            "n/a",
            "n/a",
            "n/a",
            "France",
        ]
