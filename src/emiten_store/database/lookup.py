"""Tagged result for single-row lookups."""

from dataclasses import dataclass
from typing import Any, Optional

from ..errors import NotFound, QueryError

OK = "ok"
NOT_FOUND = "not_found"
ERROR = "error"


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of a single-row lookup: a row, no row, or a store error.

    The public helpers collapse this to ``row-or-None``; callers that need to
    tell "nothing there" from "store unreachable" inspect ``status``.
    """

    status: str
    row: Optional[Any] = None
    reason: Optional[str] = None

    @classmethod
    def found(cls, row: Any) -> "LookupResult":
        return cls(status=OK, row=row)

    @classmethod
    def not_found(cls) -> "LookupResult":
        return cls(status=NOT_FOUND)

    @classmethod
    def error(cls, reason: str) -> "LookupResult":
        return cls(status=ERROR, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == OK

    @property
    def is_error(self) -> bool:
        return self.status == ERROR

    def or_none(self) -> Optional[Any]:
        return self.row if self.ok else None

    def unwrap(self) -> Any:
        """Return the row, raising NotFound or QueryError otherwise."""
        if self.ok:
            return self.row
        if self.is_error:
            raise QueryError(self.reason or "Lookup failed")
        raise NotFound("No matching row")
