"""Dialect-aware INSERT ... ON CONFLICT DO UPDATE statements."""

from typing import Any, Dict, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from ..errors import WriteError

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def build_upsert(
    session: Session,
    model: Any,
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
):
    """
    Build an upsert for one row of ``model``.

    On conflict the supplied non-key columns overwrite the stored ones; columns
    not present in ``values`` keep their stored value.

    Args:
        session: SQLAlchemy session (its bind decides the dialect)
        model: Mapped class
        values: Column values for the row
        conflict_columns: Columns of the unique constraint to resolve on

    Raises:
        WriteError: If the store dialect has no ON CONFLICT support
    """
    dialect = session.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise WriteError(
            f"Upsert is not supported for dialect '{dialect}'",
            table=model.__tablename__,
        )

    stmt = insert(model).values(**values)
    update_cols = {
        name: stmt.excluded[name]
        for name in values
        if name not in conflict_columns
    }
    if not update_cols:
        return stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
    return stmt.on_conflict_do_update(index_elements=list(conflict_columns), set_=update_cols)
