"""Pydantic read models for the API layer."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class StockQueryRecord(BaseModel):
    """One stock analysis row."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    emiten: str
    sector: Optional[str] = None
    bandar: Optional[str] = None
    barang_bandar: Optional[float] = None
    rata_rata_bandar: Optional[float] = None
    harga: Optional[float] = None
    ara: Optional[float] = None
    arb: Optional[float] = None
    fraksi: Optional[float] = None
    total_bid: Optional[float] = None
    total_offer: Optional[float] = None
    total_papan: Optional[float] = None
    rata_rata_bid_ofer: Optional[float] = None
    a: Optional[float] = None
    p: Optional[float] = None
    target_realistis: Optional[float] = None
    target_max: Optional[float] = None
    status: Optional[str] = None
    error_message: Optional[str] = None
    real_harga: Optional[float] = None


class HistoryFilters(BaseModel):
    """
    History query parameters.

    Accepts both snake_case names and the camelCase names used by request
    handlers (fromDate, toDate, sortBy, sortOrder).
    """

    model_config = ConfigDict(populate_by_name=True)

    emiten: Optional[str] = Field(default=None, description="Whitespace-separated tickers")
    sector: Optional[str] = None
    from_date: Optional[str] = Field(default=None, alias="fromDate")
    to_date: Optional[str] = Field(default=None, alias="toDate")
    status: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
    # None means the defaults: from_date, desc
    sort_by: Optional[str] = Field(default=None, alias="sortBy")
    sort_order: Optional[Literal["asc", "desc"]] = Field(default=None, alias="sortOrder")


class HistoryPage(BaseModel):
    """One page of history plus the total number of matching rows."""
    data: List[StockQueryRecord]
    count: int
