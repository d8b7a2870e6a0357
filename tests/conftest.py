"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from emiten_store.database.schema import Base, StockQuery


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine):
    """Create a temporary in-memory database session for testing."""
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()


def _add_rows(session, rows):
    for row in rows:
        session.add(StockQuery(**row))
    session.commit()


@pytest.fixture
def add_rows(session):
    """Insert stock_queries rows directly (bypassing the repo) and commit."""
    return lambda rows: _add_rows(session, rows)


@pytest.fixture
def history_rows(session):
    """
    Three tickers over three days, mixed sectors and statuses.

    BBCA/BBRI are banks, TLKM is telco; TLKM failed on 2024-01-03.
    """
    rows = []
    for day in ("2024-01-02", "2024-01-03", "2024-01-04"):
        for emiten, sector in (("BBCA", "Finance"), ("BBRI", "Finance"), ("TLKM", "Infrastructure")):
            failed = emiten == "TLKM" and day == "2024-01-03"
            rows.append({
                "from_date": day,
                "to_date": day,
                "emiten": emiten,
                "sector": sector,
                "harga": 1000.0,
                "status": "error" if failed else "success",
                "error_message": "broker summary unavailable" if failed else None,
            })
    _add_rows(session, rows)
    return rows


@pytest.fixture
def many_rows(session):
    """100 rows for one ticker, one per day, for pagination tests."""
    rows = [
        {
            "from_date": f"2024-{1 + i // 28:02d}-{1 + i % 28:02d}",
            "to_date": f"2024-{1 + i // 28:02d}-{1 + i % 28:02d}",
            "emiten": "ASII",
            "status": "success",
            "harga": float(i),
        }
        for i in range(100)
    ]
    _add_rows(session, rows)
    return rows
