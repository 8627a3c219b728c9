"""
src/data/loader.py
──────────────────
Load logger rows from CSV exports or a SQL table and turn them into Readings.

Provides:
  - read_csv_rows()  : raw rows from a data-logger CSV export
  - read_sql_rows()  : raw rows from a DB-API / SQLAlchemy connection
  - load_readings()  : parse + sort by timestamp
  - load_csv()       : read_csv_rows() → load_readings()

The analytics core assumes time-ordered input and never sorts; sorting
happens here, at the ingestion boundary.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import pandas as pd

from config.settings import settings
from src.data.models import Reading
from src.data.parser import parse_rows

logger = logging.getLogger(__name__)


def read_csv_rows(path: str | Path, encoding: str = "utf-8") -> list[dict[str, object]]:
    """
    Read every row of a CSV export as column → string.

    Cells are kept as text (blanks as ""), leaving numeric interpretation
    to the parser's default-to-zero policy.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=encoding)
    df.columns = [str(c).strip() for c in df.columns]
    logger.debug(f"Read {len(df)} rows from {path}")
    return df.to_dict(orient="records")


def read_sql_rows(conn, query: str, params: Sequence | Mapping | None = None) -> list[dict[str, object]]:
    """Run `query` and return each result row as column → value."""
    df = pd.read_sql_query(query, conn, params=params)
    return df.to_dict(orient="records")


def load_readings(
    rows: Iterable[Mapping[str, object]],
    skip_invalid: bool = settings.SKIP_INVALID_ROWS,
) -> list[Reading]:
    """Parse rows and return readings sorted by timestamp (stable)."""
    readings = parse_rows(rows, skip_invalid=skip_invalid)
    readings.sort(key=lambda r: r.timestamp)
    logger.info(f"Loaded {len(readings)} readings")
    return readings


def load_csv(
    path: str | Path,
    skip_invalid: bool = settings.SKIP_INVALID_ROWS,
    encoding: str = "utf-8",
) -> list[Reading]:
    return load_readings(read_csv_rows(path, encoding=encoding), skip_invalid=skip_invalid)
