import logging
import os
import sqlite3
from typing import Iterable, Optional, Sequence

import pandas as pd

from warehouse_pipeline.models import TableSchema

logger = logging.getLogger("Warehouse.Store")

DATE_FORMAT = "%Y-%m-%d"


class SQLiteStore:
    """
    One warehouse layer backed by a single SQLite database file.

    Every operation opens its own connection; nothing is shared between
    calls, so a store can be handed around freely within one process.
    """

    def __init__(self, db_file: str):
        """
        Args:
            db_file: Path to the SQLite database file
        """
        self.db_file = db_file
        self._ensure_db_directory()

    def __repr__(self) -> str:
        return f"SQLiteStore({self.db_file!r})"

    def _ensure_db_directory(self) -> None:
        directory = os.path.dirname(self.db_file)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_file)

    def create_tables(self, schemas: Iterable[TableSchema]) -> None:
        """Create the given tables if they don't already exist."""
        conn = self.connect()
        try:
            cursor = conn.cursor()
            for schema in schemas:
                cursor.execute(schema.create_statement())
            conn.commit()
        finally:
            conn.close()

    def replace_all(self, table: str, frame: pd.DataFrame) -> int:
        """
        Clear a table and write the given records in its place.

        The clear and the insert run in one transaction: if writing fails,
        the table keeps its previous contents and the error propagates.

        Args:
            table: Destination table name
            frame: Records to write, one column per destination column

        Returns:
            Number of records written
        """
        records = _prepare_for_sqlite(frame)
        conn = self.connect()
        try:
            conn.execute(f"DELETE FROM {table}")
            records.to_sql(table, conn, if_exists="append", index=False)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.debug(f"Replaced contents of {table} with {len(records)} records")
        return len(records)

    def read_table(self, table: str, columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """
        Read a table into a DataFrame.

        Args:
            table: Table name
            columns: Columns to select (default: all)

        Returns:
            DataFrame with the table contents
        """
        selection = ", ".join(columns) if columns else "*"
        conn = self.connect()
        try:
            return pd.read_sql(f"SELECT {selection} FROM {table}", conn)
        finally:
            conn.close()

    def count(self, table: str) -> int:
        conn = self.connect()
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT COUNT(*) FROM {table}")
            return cursor.fetchone()[0]
        finally:
            conn.close()


def _prepare_for_sqlite(frame: pd.DataFrame) -> pd.DataFrame:
    # SQLite has no date type; dates are stored as ISO text
    prepared = frame.copy()
    for column in prepared.columns:
        if pd.api.types.is_datetime64_any_dtype(prepared[column]):
            prepared[column] = prepared[column].dt.strftime(DATE_FORMAT)
    return prepared
