"""Minimal migration helpers for additive schema changes."""

from typing import List, Tuple

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from ..utils.logging import get_logger
from .schema import Base

logger = get_logger(__name__)

# Columns added after the first stock_queries release (watchlist runs, real price backfill)
STOCK_QUERY_LATE_COLUMNS: List[Tuple[str, str]] = [
    ("status", "TEXT"),
    ("error_message", "TEXT"),
    ("real_harga", "DOUBLE PRECISION"),
]


def _existing_columns(engine: Engine, table: str) -> List[str]:
    """List the column names of a table."""
    return [col["name"] for col in inspect(engine).get_columns(table)]


def _table_exists(engine: Engine, table: str) -> bool:
    """Check if a table exists."""
    return inspect(engine).has_table(table)


def ensure_tables(engine: Engine) -> None:
    """Create stock_queries and session if they don't exist."""
    Base.metadata.create_all(engine)


def ensure_stock_query_columns(engine: Engine) -> List[str]:
    """
    Add late stock_queries columns if missing.

    Args:
        engine: SQLAlchemy engine bound to the store

    Returns:
        Names of the columns that were added
    """
    if not _table_exists(engine, "stock_queries"):
        return []

    existing = _existing_columns(engine, "stock_queries")
    added: List[str] = []
    with engine.begin() as conn:
        for col, coltype in STOCK_QUERY_LATE_COLUMNS:
            if col not in existing:
                conn.execute(text(f"ALTER TABLE stock_queries ADD COLUMN {col} {coltype}"))
                added.append(col)
    if added:
        logger.info(f"Added stock_queries columns: {', '.join(added)}")
    return added


def ensure_schema(engine: Engine) -> None:
    """Create missing tables, then backfill missing columns on existing ones."""
    ensure_stock_query_columns(engine)
    ensure_tables(engine)
