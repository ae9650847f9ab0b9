import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

import pandas as pd

from warehouse_pipeline.store import SQLiteStore

logger = logging.getLogger("Warehouse.DataQuality")

MISSING_PRODUCT = "missing product reference"
MISSING_CUSTOMER = "missing customer reference"

REFERENCE_COLUMNS = ["sls_ord_num", "sls_prd_key", "sls_cust_id"]


class AuditPolicy(str, Enum):
    """What a failed audit means for the run."""
    REPORT = "report"
    BLOCK = "block"


class DataQualityError(Exception):
    """Raised when the audit finds issues and the policy is to block."""

    def __init__(self, report: "QualityReport"):
        self.report = report
        super().__init__(f"Data quality audit found {report.issue_count} issue(s)")


@dataclass
class QualityReport:
    """
    Findings of one audit run.

    Attributes:
        references: Sales rows with a dangling product or customer reference
        duplicates: Dimension table -> keys occurring more than once
    """
    references: pd.DataFrame
    duplicates: Dict[str, pd.DataFrame] = field(default_factory=dict)

    @property
    def issue_count(self) -> int:
        return len(self.references) + sum(len(found) for found in self.duplicates.values())

    @property
    def passed(self) -> bool:
        return self.issue_count == 0


def current_products(products: pd.DataFrame) -> pd.DataFrame:
    """Return the open (latest) version of every product."""
    return products[products["prd_end_dt"].isna()]


def check_referential_integrity(
    sales: pd.DataFrame,
    products: pd.DataFrame,
    customers: pd.DataFrame,
) -> pd.DataFrame:
    """
    Find sales rows whose product or customer does not exist.

    Products are matched against their current version only. A sales row
    missing both references is reported twice, once per issue.

    Args:
        sales: Silver sales details
        products: Silver product versions
        customers: Silver customers

    Returns:
        DataFrame with columns sls_ord_num, sls_prd_key, sls_cust_id, issue
    """
    known_products = current_products(products)["prd_key"].dropna().tolist()
    known_customers = customers["cst_id"].dropna().tolist()

    missing_product = ~sales["sls_prd_key"].isin(known_products)
    missing_customer = ~sales["sls_cust_id"].isin(known_customers)

    findings = pd.concat([
        sales.loc[missing_product, REFERENCE_COLUMNS].assign(issue=MISSING_PRODUCT),
        sales.loc[missing_customer, REFERENCE_COLUMNS].assign(issue=MISSING_CUSTOMER),
    ])
    return findings.sort_index(kind="mergesort").reset_index(drop=True)


def check_key_uniqueness(frame: pd.DataFrame, key: str) -> pd.DataFrame:
    """
    Find keys that occur more than once.

    Returns:
        DataFrame with columns <key>, duplicate_count
    """
    counts = frame.groupby(key).size().reset_index(name="duplicate_count")
    return counts[counts["duplicate_count"] > 1].reset_index(drop=True)


def run_quality_checks(store: SQLiteStore) -> QualityReport:
    """
    Audit the loaded silver layer. Nothing is modified.

    Args:
        store: Silver layer store

    Returns:
        QualityReport with all findings
    """
    sales = store.read_table("crm_sales_details", REFERENCE_COLUMNS)
    products = store.read_table("crm_prd_info", ["prd_key", "prd_end_dt"])
    customers = store.read_table("crm_cust_info", ["cst_id"])

    report = QualityReport(
        references=check_referential_integrity(sales, products, customers),
        duplicates={
            "crm_cust_info": check_key_uniqueness(customers, "cst_id"),
            "crm_prd_info": check_key_uniqueness(current_products(products), "prd_key"),
        },
    )

    for issue, count in report.references["issue"].value_counts().items():
        logger.warning(f"{count} sales rows with {issue}")
    for table, found in report.duplicates.items():
        if len(found):
            logger.warning(f"{len(found)} duplicate keys in silver.{table}")

    if report.passed:
        logger.info("Data quality audit passed")
    return report


def enforce_policy(report: QualityReport, policy: AuditPolicy) -> None:
    """
    Apply the audit policy to a report.

    Raises:
        DataQualityError: If the report has issues and the policy is BLOCK
    """
    if report.passed:
        return
    if policy is AuditPolicy.BLOCK:
        raise DataQualityError(report)
    logger.warning(f"Data quality audit found {report.issue_count} issue(s); reporting only")
