import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from warehouse_pipeline.quality import AuditPolicy


@dataclass
class Settings:
    """Runtime configuration for one silver load."""

    bronze_db: str
    silver_db: str
    log_dir: str
    log_level: str
    audit_policy: AuditPolicy
    export_dir: Optional[str] = None


def get_settings() -> Settings:
    """
    Build settings from the environment and a .env file found from the
    working directory upwards, if any.

    Environment variables:
        WAREHOUSE_DATA_DIR: Base directory for database files (default: data)
        BRONZE_DB / SILVER_DB: Database files (default: <data>/bronze_raw.db, <data>/silver_raw.db)
        LOG_DIR / LOG_LEVEL: Log file directory and level (default: logs, INFO)
        AUDIT_POLICY: 'report' or 'block' (default: report)
        SILVER_EXPORT_DIR: Export silver tables to Parquet here when set

    Returns:
        Settings
    """
    load_dotenv(find_dotenv(usecwd=True))

    data_dir = os.environ.get("WAREHOUSE_DATA_DIR", "data")
    policy = os.environ.get("AUDIT_POLICY", AuditPolicy.REPORT.value).strip().lower()

    return Settings(
        bronze_db=os.environ.get("BRONZE_DB", os.path.join(data_dir, "bronze_raw.db")),
        silver_db=os.environ.get("SILVER_DB", os.path.join(data_dir, "silver_raw.db")),
        log_dir=os.environ.get("LOG_DIR", "logs"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        audit_policy=AuditPolicy(policy),
        export_dir=os.environ.get("SILVER_EXPORT_DIR") or None,
    )
