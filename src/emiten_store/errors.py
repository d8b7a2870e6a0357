"""
Exception hierarchy for the emiten store.

Exception Hierarchy:
    StoreError (base)
    ├── QueryError
    ├── WriteError
    ├── NotFound
    └── ConfigurationError
"""

from typing import Any, Dict, Optional


class StoreError(Exception):
    """
    Base exception for all store errors.

    Attributes:
        message: Human-readable error description
        details: Additional context (table, emiten, key, ...)
        cause: Original exception if this wraps another error
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with details."""
        msg = self.message
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            msg = f"{msg} [{detail_str}]"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {self.cause})"
        return msg


class QueryError(StoreError):
    """
    Raised when a read against the store fails.

    Examples:
        - Store unreachable
        - Unknown sort column
    """

    def __init__(self, message: str, table: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        super().__init__(message, details=details, **kwargs)


class WriteError(StoreError):
    """Raised when an upsert or update is rejected by the store."""

    def __init__(self, message: str, table: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        super().__init__(message, details=details, **kwargs)


class NotFound(StoreError):
    """Raised when a lookup matched no row."""
    pass


class ConfigurationError(StoreError):
    """
    Raised when required configuration is missing or invalid.

    Treated as fatal at startup.
    """

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if setting:
            details["setting"] = setting
        super().__init__(message, details=details, **kwargs)
