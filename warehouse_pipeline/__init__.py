"""
SQLite Medallion Warehouse - Silver Load Package

Modules:
    bronze.py       - Bronze source table layouts and the source reader.
    silver.py       - Silver table layouts and per-table cleansing transforms.
    normalize.py    - Field cleansing rules (trimming, code mapping).
    dedup.py        - Latest-record selection per business key.
    derive.py       - Derived product attributes (category id, end dates).
    repair.py       - Repair rules for invalid amounts, prices and dates.
    quality.py      - Read-only data quality audit of the silver layer.
    store.py        - SQLite-backed store for one warehouse layer.
    config.py       - Environment based settings.
    run_pipeline.py - Orchestrates the silver load and the audit.

Version: 1.0.0
"""
__version__ = "1.0.0"
