from sqlalchemy import (
    Column,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class StockQuery(Base):
    """Stock analysis result, one row per (from_date, emiten)."""
    __tablename__ = "stock_queries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_date = Column(String, nullable=True, index=True)  # YYYY-MM-DD
    emiten = Column(String, nullable=False, index=True)
    sector = Column(String, nullable=True)
    to_date = Column(String, nullable=True)  # YYYY-MM-DD

    # Bandar (market-maker) accumulation
    bandar = Column(String, nullable=True)
    barang_bandar = Column(Float, nullable=True)
    rata_rata_bandar = Column(Float, nullable=True)

    # Price and daily limits
    harga = Column(Float, nullable=True)
    ara = Column(Float, nullable=True)  # watchlist runs store offer_teratas here
    arb = Column(Float, nullable=True)  # watchlist runs store bid_terbawah here
    fraksi = Column(Float, nullable=True)

    # Order book
    total_bid = Column(Float, nullable=True)
    total_offer = Column(Float, nullable=True)
    total_papan = Column(Float, nullable=True)
    rata_rata_bid_ofer = Column(Float, nullable=True)

    a = Column(Float, nullable=True)
    p = Column(Float, nullable=True)
    target_realistis = Column(Float, nullable=True)
    target_max = Column(Float, nullable=True)

    status = Column(String, nullable=True, index=True)  # success | error
    error_message = Column(Text, nullable=True)
    real_harga = Column(Float, nullable=True)  # filled in once the next day's price is known

    __table_args__ = (
        UniqueConstraint("from_date", "emiten", name="uq_stock_queries_from_date_emiten"),
    )


class SessionEntry(Base):
    """Key-value session storage."""
    __tablename__ = "session"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(String, nullable=True)  # ISO 8601 string
