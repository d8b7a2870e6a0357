"""History API: canonical read surface for stock analysis data."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Session

from ..config.loader import DEFAULT_PAGE_SIZE
from ..database.stock_query_repo import fetch_history, get_latest_stock_query
from .models import HistoryFilters, HistoryPage, StockQueryRecord

if TYPE_CHECKING:
    from ..database.schema import StockQuery


def _row_to_record(row: "StockQuery") -> StockQueryRecord:
    """Convert StockQuery ORM row to StockQueryRecord Pydantic model."""
    return StockQueryRecord.model_validate(row)


def get_analysis_history(
    session: Session,
    filters: Optional[HistoryFilters] = None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> HistoryPage:
    """
    List analysis history with optional filters.

    Args:
        session: SQLAlchemy session
        filters: Validated filters; None means everything, newest first
        default_page_size: Page size when an offset is given without a limit

    Returns:
        HistoryPage with the requested rows and the total filtered count

    Raises:
        QueryError: If the store query fails or sort_by names no column
    """
    filters = filters or HistoryFilters()
    rows, count = fetch_history(
        session,
        emiten=filters.emiten,
        sector=filters.sector,
        from_date=filters.from_date,
        to_date=filters.to_date,
        status=filters.status,
        limit=filters.limit,
        offset=filters.offset,
        sort_by=filters.sort_by,
        sort_order=filters.sort_order,
        default_page_size=default_page_size,
    )
    return HistoryPage(data=[_row_to_record(r) for r in rows], count=count)


def get_latest_analysis(session: Session, emiten: str) -> Optional[StockQueryRecord]:
    """Latest successful analysis for an emiten, or None."""
    row = get_latest_stock_query(session, emiten)
    if row is None:
        return None
    return _row_to_record(row)
