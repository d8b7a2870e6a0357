"""Repository functions for stock_queries table operations."""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config.loader import DEFAULT_PAGE_SIZE
from ..errors import QueryError, WriteError
from ..utils.logging import get_logger
from .lookup import LookupResult
from .schema import StockQuery
from .upsert import build_upsert

logger = get_logger(__name__)

CONFLICT_COLUMNS = ("from_date", "emiten")
SUCCESS_STATUS = "success"

STOCK_QUERY_COLUMNS = {column.name: column for column in StockQuery.__table__.columns}
WRITABLE_FIELDS = frozenset(name for name in STOCK_QUERY_COLUMNS if name != "id")


def _check_fields(data: Dict[str, Any], required: Iterable[str]) -> None:
    unknown = sorted(set(data) - WRITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown stock_queries fields: {', '.join(unknown)}")
    for field in required:
        if not data.get(field):
            raise ValueError(f"stock_queries record missing required field: {field}")


def upsert_stock_query(session: Session, data: Dict[str, Any]) -> List[StockQuery]:
    """
    Insert or overwrite a stock_queries row keyed on (from_date, emiten).

    Only the supplied columns are written; on conflict they replace the stored
    values. Commits on success.

    Args:
        session: SQLAlchemy session
        data: Column values (must include emiten)

    Returns:
        The stored row(s) for the key

    Raises:
        ValueError: If data has unknown fields or no emiten
        WriteError: If the store rejects the upsert (session is rolled back)
    """
    _check_fields(data, required=("emiten",))

    try:
        session.execute(build_upsert(session, StockQuery, data, CONFLICT_COLUMNS))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error saving stock query {data.get('emiten')}/{data.get('from_date')}: {e}")
        raise WriteError(
            "Failed to upsert stock query",
            table="stock_queries",
            details={"emiten": data.get("emiten"), "from_date": data.get("from_date")},
            cause=e,
        ) from e

    rows = (
        session.query(StockQuery)
        .filter(StockQuery.emiten == data["emiten"])
        .filter(StockQuery.from_date == data.get("from_date"))
        .all()
    )
    logger.debug(f"Upserted stock query {data['emiten']} ({data.get('from_date')})")
    return rows


def save_stock_query(session: Session, data: Dict[str, Any]) -> List[StockQuery]:
    """Save an ad-hoc stock lookup."""
    return upsert_stock_query(session, data)


def save_watchlist_analysis(session: Session, data: Dict[str, Any]) -> List[StockQuery]:
    """
    Save a daily watchlist analysis into stock_queries.

    from_date and to_date are both the analysis date. ``ara``/``arb`` carry the
    top offer and bottom bid of the day. ``status`` and ``error_message`` record
    whether the analysis succeeded.

    Raises:
        ValueError: If from_date, to_date or emiten is missing
        WriteError: If the store rejects the upsert
    """
    _check_fields(data, required=("from_date", "to_date", "emiten"))
    return upsert_stock_query(session, data)


def _resolve_sort(sort_by: str, sort_order: str) -> list:
    """
    Translate (sort_by, sort_order) into ORDER BY clauses.

    - combined: from_date, then emiten, both in the requested direction
    - emiten: emiten in the requested direction, then from_date ascending
    - any other column: that column alone
    """
    ascending = sort_order == "asc"

    def direction(column, asc: bool):
        return column.asc() if asc else column.desc()

    if sort_by == "combined":
        return [
            direction(StockQuery.from_date, ascending),
            direction(StockQuery.emiten, ascending),
        ]
    if sort_by == "emiten":
        return [
            direction(StockQuery.emiten, ascending),
            StockQuery.from_date.asc(),
        ]

    column = STOCK_QUERY_COLUMNS.get(sort_by)
    if column is None:
        raise QueryError(f"Unknown sort column: {sort_by}", table="stock_queries")
    return [direction(column, ascending)]


def fetch_history(
    session: Session,
    emiten: Optional[str] = None,
    sector: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> Tuple[List[StockQuery], int]:
    """
    Query analysis history with optional filters, sorting and pagination.

    Args:
        session: SQLAlchemy session
        emiten: Whitespace-separated tickers; rows matching any of them
        sector: Exact sector match
        from_date: Earliest from_date (inclusive, YYYY-MM-DD)
        to_date: Latest from_date (inclusive, YYYY-MM-DD)
        status: Exact status match
        limit: Maximum number of rows
        offset: Rows to skip; the page is then `limit` rows, or
            `default_page_size` if no limit is given
        sort_by: "combined", "emiten" or a column name (default from_date)
        sort_order: "asc" or "desc" (default desc)
        default_page_size: Page size used when offset is given without limit

    Returns:
        (rows, total_count) where total_count counts every filtered row,
        ignoring limit/offset

    Raises:
        QueryError: If the sort column is unknown or the store query fails
    """
    query = session.query(StockQuery)

    if emiten:
        emiten_list = emiten.split()
        # Never send an empty IN ()
        if emiten_list:
            query = query.filter(StockQuery.emiten.in_(emiten_list))
    if sector:
        query = query.filter(StockQuery.sector == sector)
    if from_date:
        query = query.filter(StockQuery.from_date >= from_date)
    if to_date:
        query = query.filter(StockQuery.from_date <= to_date)
    if status:
        query = query.filter(StockQuery.status == status)

    order_by = _resolve_sort(sort_by or "from_date", sort_order or "desc")

    try:
        total_count = query.count()

        query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset).limit(limit or default_page_size)
        elif limit:
            query = query.limit(limit)

        rows = query.all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching watchlist analysis: {e}")
        raise QueryError("Failed to fetch analysis history", table="stock_queries", cause=e) from e

    return rows, total_count


def lookup_latest_stock_query(session: Session, emiten: str) -> LookupResult:
    """Most recent successful analysis for an emiten, as a tagged result."""
    try:
        row = (
            session.query(StockQuery)
            .filter(StockQuery.emiten == emiten)
            .filter(StockQuery.status == SUCCESS_STATUS)
            .order_by(StockQuery.from_date.desc())
            .first()
        )
    except SQLAlchemyError as e:
        session.rollback()
        return LookupResult.error(str(e))
    return LookupResult.found(row) if row is not None else LookupResult.not_found()


def get_latest_stock_query(session: Session, emiten: str) -> Optional[StockQuery]:
    """
    Get the most recent successful analysis for an emiten.

    Returns None both when no row exists and when the lookup fails.
    """
    result = lookup_latest_stock_query(session, emiten)
    if result.is_error:
        logger.warning(f"Latest stock query lookup failed for {emiten}: {result.reason}")
    return result.or_none()


def lookup_previous_success(session: Session, emiten: str, current_date: str) -> LookupResult:
    """Latest successful analysis for an emiten strictly before current_date."""
    try:
        row = (
            session.query(StockQuery)
            .filter(StockQuery.emiten == emiten)
            .filter(StockQuery.status == SUCCESS_STATUS)
            .filter(StockQuery.from_date < current_date)
            .order_by(StockQuery.from_date.desc())
            .first()
        )
    except SQLAlchemyError as e:
        session.rollback()
        return LookupResult.error(str(e))
    return LookupResult.found(row) if row is not None else LookupResult.not_found()


def update_previous_day_real_price(
    session: Session,
    emiten: str,
    current_date: str,
    price: float,
) -> Optional[List[StockQuery]]:
    """
    Record today's price as the real price of the previous successful analysis.

    Args:
        session: SQLAlchemy session
        emiten: Ticker symbol
        current_date: Date of the new data (YYYY-MM-DD); only earlier rows qualify
        price: Price to store in real_harga

    Returns:
        The updated row(s), or None if there is no earlier successful analysis
        (or the lookup failed, which is logged)

    Raises:
        WriteError: If the update itself is rejected by the store
    """
    result = lookup_previous_success(session, emiten, current_date)
    if not result.ok:
        if result.is_error:
            logger.error(f"Error finding previous record for {emiten} before {current_date}: {result.reason}")
        return None

    record_id = result.row.id
    record_date = result.row.from_date
    try:
        session.query(StockQuery).filter(StockQuery.id == record_id).update(
            {StockQuery.real_harga: price},
            synchronize_session=False,
        )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error updating real_harga for {emiten} on {record_date}: {e}")
        raise WriteError(
            "Failed to update real_harga",
            table="stock_queries",
            details={"emiten": emiten, "from_date": record_date},
            cause=e,
        ) from e

    logger.debug(f"Set real_harga={price} for {emiten} on {record_date}")
    return session.query(StockQuery).filter(StockQuery.id == record_id).all()
