"""
Pytest Configuration and Fixtures

Shared SQLite stores and sample bronze data for all tests.
"""

import os
import sys

import pandas as pd
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from warehouse_pipeline.bronze import BRONZE_TABLES, create_bronze_tables
from warehouse_pipeline.silver import SILVER_TABLES, create_silver_tables
from warehouse_pipeline.store import SQLiteStore


def write_rows(store, table, rows, schemas=BRONZE_TABLES):
    """Replace ``table`` with the given tuples, in schema column order."""
    frame = pd.DataFrame(rows, columns=schemas[table].column_names)
    return store.replace_all(table, frame)


def write_silver_rows(store, table, rows):
    return write_rows(store, table, rows, schemas=SILVER_TABLES)


@pytest.fixture
def bronze_store(tmp_path):
    """Empty bronze database with all source tables."""
    store = SQLiteStore(str(tmp_path / "bronze" / "bronze_raw.db"))
    create_bronze_tables(store)
    return store


@pytest.fixture
def silver_store(tmp_path):
    """Empty silver database with all destination tables."""
    store = SQLiteStore(str(tmp_path / "silver" / "silver_raw.db"))
    create_silver_tables(store)
    return store


@pytest.fixture
def seeded_bronze(bronze_store):
    """
    Bronze database with a small, deliberately dirty extract:
    a duplicated customer, a product with two versions, sales with broken
    dates and amounts, one sale pointing at unknown product and customer.
    """
    write_rows(bronze_store, "crm_cust_info", [
        (1, "AW00000001", " Jon ", "Yang ", "s", "M", "2025-01-01"),
        (1, "AW00000001", "Jon", "Yang", "M", "m", "2025-06-01"),
        (2, "AW00000002", "Eugene", " Huang", "S", "F", "2025-01-02"),
    ])
    write_rows(bronze_store, "crm_prd_info", [
        (210, "CO-RF-FR-R92B-58", "HL Road Frame", None, "R ", "2021-01-01", None),
        (211, "CO-RF-FR-R92B-58", "HL Road Frame", 12, "R", "2021-06-01", None),
        (212, "BI-MB-BK-M82B-44", "Mountain-100", 1898, "m", "2022-01-01", None),
    ])
    write_rows(bronze_store, "crm_sales_details", [
        ("SO1", "FR-R92B-58", 1, 20231022, 20231029, 20231103, 50, 1, 50),
        ("SO2", "BK-M82B-44", 2, 0, 20231029, 202310, None, 2, 10),
        ("SO3", "XX-0000", 99, 20231022, 20231029, 20231103, 10, 1, -10),
    ])
    write_rows(bronze_store, "erp_cust_az12", [
        ("NASAW00000001", "1970-01-01", " male"),
        ("AW00000002", "2099-01-01", "F"),
    ])
    write_rows(bronze_store, "erp_loc_a101", [
        ("AW-00000001", "DE"),
        ("AW-00000002", " "),
        ("AW-00000003", "USA"),
    ])
    write_rows(bronze_store, "erp_px_cat_g1v2", [
        ("CO_RF", "Components", "Road Frames", "Yes"),
    ])
    return bronze_store
