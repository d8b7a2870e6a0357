"""Repository functions for the key-value session table."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import WriteError
from ..utils.logging import get_logger
from .lookup import LookupResult
from .schema import SessionEntry
from .upsert import build_upsert

logger = get_logger(__name__)


def _updated_at_now() -> str:
    """Current UTC time as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def lookup_session_entry(session: Session, key: str) -> LookupResult:
    """Session entry for a key, as a tagged result."""
    try:
        row = session.query(SessionEntry).filter(SessionEntry.key == key).first()
    except SQLAlchemyError as e:
        session.rollback()
        return LookupResult.error(str(e))
    return LookupResult.found(row) if row is not None else LookupResult.not_found()


def get_session_value(session: Session, key: str) -> Optional[str]:
    """Get the stored value for a key, or None if missing or the lookup fails."""
    result = lookup_session_entry(session, key)
    if result.is_error:
        logger.warning(f"Session lookup failed for {key}: {result.reason}")
    row = result.or_none()
    return row.value if row is not None else None


def upsert_session(session: Session, key: str, value: str) -> List[SessionEntry]:
    """
    Insert or overwrite the value for a key, stamping updated_at (UTC).

    Raises:
        WriteError: If the store rejects the upsert (session is rolled back)
    """
    values = {"key": key, "value": value, "updated_at": _updated_at_now()}
    try:
        session.execute(build_upsert(session, SessionEntry, values, ("key",)))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error saving session value {key}: {e}")
        raise WriteError("Failed to upsert session value", table="session", details={"key": key}, cause=e) from e

    logger.debug(f"Upserted session value {key}")
    return session.query(SessionEntry).filter(SessionEntry.key == key).all()
