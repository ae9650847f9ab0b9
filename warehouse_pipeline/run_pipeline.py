import datetime
import logging
import os
import sys
import time
from dataclasses import dataclass, field
from typing import List, Optional

from utils.logger import setup_logger
from warehouse_pipeline.bronze import read_source
from warehouse_pipeline.config import Settings, get_settings
from warehouse_pipeline.quality import DataQualityError, enforce_policy, run_quality_checks
from warehouse_pipeline.silver import SILVER_TABLES, create_silver_tables, silver_load_steps
from warehouse_pipeline.store import SQLiteStore

logger = logging.getLogger("Warehouse.Pipeline")

BANNER = "=" * 46
SECTION = "-" * 46


@dataclass
class TableLoadResult:
    table: str
    rows: int
    duration_seconds: float


class SilverLoadError(Exception):
    """A silver load that stopped at ``table``."""

    def __init__(self, table: Optional[str], message: str):
        self.table = table
        super().__init__(f"Silver load failed at {table}: {message}")


@dataclass
class LoadReport:
    """
    Outcome of one silver load.

    Attributes:
        results: Tables loaded so far, in load order
        duration_seconds: Wall-clock duration of the whole batch
        failed_table: Table being loaded when the run failed
        error: Message of the error that stopped the run
    """
    results: List[TableLoadResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    failed_table: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def row_counts(self) -> dict:
        return {result.table: result.rows for result in self.results}

    def raise_for_failure(self) -> None:
        if not self.succeeded:
            raise SilverLoadError(self.failed_table, self.error)


def load_silver(
    bronze_store: SQLiteStore,
    silver_store: SQLiteStore,
    as_of: Optional[datetime.date] = None,
) -> LoadReport:
    """
    Rebuild all six silver tables from bronze.

    Tables are loaded one at a time. Each table is replaced in a single
    transaction; the batch as a whole is not atomic. On the first error the
    run stops: tables loaded before it keep their new contents, the failing
    table and the ones after it keep their previous contents.

    Args:
        bronze_store: Source layer
        silver_store: Destination layer (tables must exist)
        as_of: Reference date for future birth date checks (default: today)

    Returns:
        LoadReport with per-table row counts and durations, or the failure
    """
    report = LoadReport()
    batch_start = time.perf_counter()
    current_table = None
    system = None

    logger.info(BANNER)
    logger.info("Starting Silver Layer Load")
    logger.info(BANNER)

    try:
        for step in silver_load_steps(as_of):
            if step.system != system:
                system = step.system
                logger.info(SECTION)
                logger.info(f"Loading {system} Tables into Silver Layer")
                logger.info(SECTION)

            current_table = step.table
            start = time.perf_counter()
            logger.info(f">> Transforming & Loading Table: silver.{step.table}")

            records = step.transform(read_source(bronze_store, step.source))
            silver_store.replace_all(step.table, records)
            rows = silver_store.count(step.table)

            duration = time.perf_counter() - start
            report.results.append(TableLoadResult(step.table, rows, duration))
            logger.info(f">> silver.{step.table} Loaded | Rows: {rows} | Duration: {duration:.3f} seconds")

    except Exception as e:
        report.failed_table = current_table
        report.error = str(e) or type(e).__name__
        report.duration_seconds = time.perf_counter() - batch_start
        logger.error(BANNER)
        logger.error(f"ERROR OCCURRED DURING SILVER LOAD (table: silver.{current_table})")
        logger.error(f"ERROR MESSAGE: {report.error}")
        logger.error(BANNER)
        return report

    report.duration_seconds = time.perf_counter() - batch_start
    logger.info(BANNER)
    logger.info("Silver Layer Loading Completed Successfully")
    logger.info(f"Total Duration: {report.duration_seconds:.3f} seconds")
    logger.info(BANNER)
    return report


def export_table_to_parquet(store: SQLiteStore, table_name: str, output_file: str) -> None:
    df = store.read_table(table_name)
    if df.empty:
        logger.warning(f"Table '{table_name}' in {store.db_file} is empty. No data to export.")
    else:
        df.to_parquet(output_file, index=False)
        logger.info(f"Exported {len(df)} records from table '{table_name}' to {output_file}")


def export_silver_tables(store: SQLiteStore, output_dir: str) -> List[str]:
    """
    Export every silver table to a timestamped Parquet snapshot.

    Returns:
        Paths of the files written
    """
    os.makedirs(output_dir, exist_ok=True)
    ts = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    written = []
    for table_name in SILVER_TABLES:
        output_file = os.path.join(output_dir, f"{ts}_silver_{table_name}.parquet")
        export_table_to_parquet(store, table_name, output_file)
        if os.path.exists(output_file):
            written.append(output_file)
    return written


def run(settings: Optional[Settings] = None) -> int:
    """
    Run the silver load, the data quality audit and the optional export.

    Returns:
        Process exit status: 0 on success, 1 if the load failed or the
        audit blocked the release
    """
    settings = settings or get_settings()
    bronze_store = SQLiteStore(settings.bronze_db)
    silver_store = SQLiteStore(settings.silver_db)

    logger.info(f"Loading silver database {settings.silver_db} from {settings.bronze_db}")
    create_silver_tables(silver_store)

    report = load_silver(bronze_store, silver_store)
    if not report.succeeded:
        return 1

    quality = run_quality_checks(silver_store)
    try:
        enforce_policy(quality, settings.audit_policy)
    except DataQualityError as e:
        logger.error(f"Silver release blocked: {e}")
        return 1

    if settings.export_dir:
        export_silver_tables(silver_store, settings.export_dir)

    return 0


def main() -> None:
    settings = get_settings()
    setup_logger("Warehouse", log_file="silver_load.log", level=settings.log_level, log_dir=settings.log_dir)
    sys.exit(run(settings))


if __name__ == "__main__":
    main()
