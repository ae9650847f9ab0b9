import datetime
import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Optional

import pandas as pd

from warehouse_pipeline.dedup import latest_per_key
from warehouse_pipeline.derive import chain_end_dates, split_product_key
from warehouse_pipeline.models import (
    CRM_GENDER_CODES,
    ERP_GENDER_CODES,
    MARITAL_STATUS_CODES,
    PRODUCT_LINE_CODES,
    Gender,
    MaritalStatus,
    ProductLine,
    TableSchema,
)
from warehouse_pipeline.normalize import (
    expand_country,
    map_codes,
    remove_hyphens,
    strip_prefix,
    trim_text,
)
from warehouse_pipeline.repair import (
    null_future_dates,
    parse_yyyymmdd,
    repair_price,
    repair_sales_amount,
)
from warehouse_pipeline.store import SQLiteStore

logger = logging.getLogger("Warehouse.SilverLayer")

LOAD_TIMESTAMP = {"dwh_create_date": "TIMESTAMP DEFAULT CURRENT_TIMESTAMP"}

SILVER_TABLES: Dict[str, TableSchema] = {
    schema.name: schema
    for schema in (
        TableSchema(
            name="crm_cust_info",
            columns={
                "cst_id": "INTEGER",
                "cst_key": "TEXT",
                "cst_firstname": "TEXT",
                "cst_lastname": "TEXT",
                "cst_marital_status": "TEXT",
                "cst_gndr": "TEXT",
                "cst_create_date": "DATE",
            },
            date_columns=("cst_create_date",),
            defaults=LOAD_TIMESTAMP,
        ),
        TableSchema(
            name="crm_prd_info",
            columns={
                "prd_id": "INTEGER",
                "cat_id": "TEXT",
                "prd_key": "TEXT",
                "prd_nm": "TEXT",
                "prd_cost": "INTEGER",
                "prd_line": "TEXT",
                "prd_start_dt": "DATE",
                "prd_end_dt": "DATE",
            },
            date_columns=("prd_start_dt", "prd_end_dt"),
            defaults=LOAD_TIMESTAMP,
        ),
        TableSchema(
            name="crm_sales_details",
            columns={
                "sls_ord_num": "TEXT",
                "sls_prd_key": "TEXT",
                "sls_cust_id": "INTEGER",
                "sls_order_dt": "DATE",
                "sls_ship_dt": "DATE",
                "sls_due_dt": "DATE",
                "sls_sales": "REAL",
                "sls_quantity": "INTEGER",
                "sls_price": "REAL",
            },
            date_columns=("sls_order_dt", "sls_ship_dt", "sls_due_dt"),
            defaults=LOAD_TIMESTAMP,
        ),
        TableSchema(
            name="erp_cust_az12",
            columns={"cid": "TEXT", "bdate": "DATE", "gen": "TEXT"},
            date_columns=("bdate",),
            defaults=LOAD_TIMESTAMP,
        ),
        TableSchema(
            name="erp_loc_a101",
            columns={"cid": "TEXT", "cntry": "TEXT"},
            defaults=LOAD_TIMESTAMP,
        ),
        TableSchema(
            name="erp_px_cat_g1v2",
            columns={"id": "TEXT", "cat": "TEXT", "subcat": "TEXT", "maintenance": "TEXT"},
            defaults=LOAD_TIMESTAMP,
        ),
    )
}


def create_silver_tables(store: SQLiteStore) -> None:
    """
    Create the six silver tables if they don't already exist.
    """
    store.create_tables(SILVER_TABLES.values())


def transform_customers(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Cleanse CRM customers, keeping only the latest record per customer id.
    """
    latest = latest_per_key(frame, "cst_id", "cst_create_date")
    dropped = len(frame) - len(latest)
    if dropped:
        logger.info(f"Dropped {dropped} superseded or keyless customer records")
    return pd.DataFrame({
        "cst_id": latest["cst_id"].astype("Int64"),
        "cst_key": latest["cst_key"],
        "cst_firstname": trim_text(latest["cst_firstname"]),
        "cst_lastname": trim_text(latest["cst_lastname"]),
        "cst_marital_status": map_codes(latest["cst_marital_status"], MARITAL_STATUS_CODES, MaritalStatus.UNKNOWN),
        "cst_gndr": map_codes(latest["cst_gndr"], CRM_GENDER_CODES, Gender.UNKNOWN),
        "cst_create_date": pd.to_datetime(latest["cst_create_date"]),
    })


def transform_products(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Split product keys, default missing costs, label product lines and
    derive each version's end date from the next version's start date.
    """
    category_id, product_key = split_product_key(frame["prd_key"])
    start_dates = pd.to_datetime(frame["prd_start_dt"]).dt.normalize()
    end_dates = chain_end_dates(
        frame.assign(prd_start_dt=start_dates), key="prd_key", start="prd_start_dt", tiebreak="prd_id"
    )
    return pd.DataFrame({
        "prd_id": frame["prd_id"],
        "cat_id": category_id,
        "prd_key": product_key,
        "prd_nm": frame["prd_nm"],
        "prd_cost": pd.to_numeric(frame["prd_cost"], errors="coerce").fillna(0),
        "prd_line": map_codes(frame["prd_line"], PRODUCT_LINE_CODES, ProductLine.UNKNOWN),
        "prd_start_dt": start_dates,
        "prd_end_dt": end_dates,
    })


def transform_sales(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Validate YYYYMMDD dates and repair sales amounts and prices.
    """
    sales = repair_sales_amount(frame["sls_sales"], frame["sls_quantity"], frame["sls_price"])
    price = repair_price(frame["sls_price"], sales, frame["sls_quantity"])
    return pd.DataFrame({
        "sls_ord_num": frame["sls_ord_num"],
        "sls_prd_key": frame["sls_prd_key"],
        "sls_cust_id": frame["sls_cust_id"],
        "sls_order_dt": parse_yyyymmdd(frame["sls_order_dt"]),
        "sls_ship_dt": parse_yyyymmdd(frame["sls_ship_dt"]),
        "sls_due_dt": parse_yyyymmdd(frame["sls_due_dt"]),
        "sls_sales": sales,
        "sls_quantity": frame["sls_quantity"],
        "sls_price": price,
    })


def transform_erp_customers(frame: pd.DataFrame, as_of: Optional[datetime.date] = None) -> pd.DataFrame:
    """
    Strip the 'NAS' prefix from ERP customer ids, drop birth dates in the
    future and normalize gender.
    """
    return pd.DataFrame({
        "cid": strip_prefix(frame["cid"], "NAS"),
        "bdate": null_future_dates(frame["bdate"], as_of),
        "gen": map_codes(frame["gen"], ERP_GENDER_CODES, Gender.UNKNOWN),
    })


def transform_erp_locations(frame: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame({
        "cid": remove_hyphens(frame["cid"]),
        "cntry": expand_country(frame["cntry"]),
    })


def transform_erp_categories(frame: pd.DataFrame) -> pd.DataFrame:
    # Category master is already clean; copied as is.
    return frame[SILVER_TABLES["erp_px_cat_g1v2"].column_names].copy()


@dataclass(frozen=True)
class LoadStep:
    """One bronze table feeding one silver table."""
    system: str
    table: str
    transform: Callable[[pd.DataFrame], pd.DataFrame]

    @property
    def source(self) -> str:
        return self.table


def silver_load_steps(as_of: Optional[datetime.date] = None) -> List[LoadStep]:
    """
    Return the silver load steps in execution order.

    Args:
        as_of: Reference date for future birth date checks (default: today)
    """
    return [
        LoadStep("CRM", "crm_cust_info", transform_customers),
        LoadStep("CRM", "crm_prd_info", transform_products),
        LoadStep("CRM", "crm_sales_details", transform_sales),
        LoadStep("ERP", "erp_cust_az12", partial(transform_erp_customers, as_of=as_of)),
        LoadStep("ERP", "erp_loc_a101", transform_erp_locations),
        LoadStep("ERP", "erp_px_cat_g1v2", transform_erp_categories),
    ]
