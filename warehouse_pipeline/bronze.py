import logging
from typing import Dict

import pandas as pd

from warehouse_pipeline.models import TableSchema
from warehouse_pipeline.store import SQLiteStore

logger = logging.getLogger("Warehouse.BronzeLayer")

# Raw layouts of the six source extracts. Column names follow the CSV headers
# of the CRM and ERP exports.
BRONZE_TABLES: Dict[str, TableSchema] = {
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
        ),
        TableSchema(
            name="crm_prd_info",
            columns={
                "prd_id": "INTEGER",
                "prd_key": "TEXT",
                "prd_nm": "TEXT",
                "prd_cost": "INTEGER",
                "prd_line": "TEXT",
                "prd_start_dt": "TIMESTAMP",
                "prd_end_dt": "TIMESTAMP",
            },
            date_columns=("prd_start_dt", "prd_end_dt"),
        ),
        TableSchema(
            # Sales dates arrive as YYYYMMDD integers and are validated in silver.
            name="crm_sales_details",
            columns={
                "sls_ord_num": "TEXT",
                "sls_prd_key": "TEXT",
                "sls_cust_id": "INTEGER",
                "sls_order_dt": "INTEGER",
                "sls_ship_dt": "INTEGER",
                "sls_due_dt": "INTEGER",
                "sls_sales": "INTEGER",
                "sls_quantity": "INTEGER",
                "sls_price": "INTEGER",
            },
        ),
        TableSchema(
            name="erp_cust_az12",
            columns={"cid": "TEXT", "bdate": "DATE", "gen": "TEXT"},
            date_columns=("bdate",),
        ),
        TableSchema(
            name="erp_loc_a101",
            columns={"cid": "TEXT", "cntry": "TEXT"},
        ),
        TableSchema(
            name="erp_px_cat_g1v2",
            columns={"id": "TEXT", "cat": "TEXT", "subcat": "TEXT", "maintenance": "TEXT"},
        ),
    )
}


def create_bronze_tables(store: SQLiteStore) -> None:
    """
    Create the six bronze source tables if they don't already exist.
    """
    store.create_tables(BRONZE_TABLES.values())


def read_source(store: SQLiteStore, table: str) -> pd.DataFrame:
    """
    Read one bronze table as a read-only snapshot.

    Only the declared columns are selected, so a bronze table that lost one
    of them fails here instead of further down the pipeline. Declared date
    columns are parsed; values that are not ISO dates become NaT.

    Args:
        store: Bronze layer store
        table: Source table name

    Returns:
        DataFrame with the raw records
    """
    schema = BRONZE_TABLES[table]
    frame = store.read_table(table, schema.column_names)
    for column in schema.date_columns:
        frame[column] = pd.to_datetime(frame[column], format="ISO8601", errors="coerce")
    logger.info(f"Read {len(frame)} records from bronze.{table}")
    return frame
