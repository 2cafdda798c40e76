"""
Ingestion exceptions.

Only session-level faults and a failed first page escape a catalog
traversal; every other navigation problem ends pagination quietly.
"""

from datetime import datetime, timezone


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        url: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.url = url
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class SessionError(ExtractionError):
    """Raised when the browser fails to start or dies mid-traversal."""

    pass


class NavigationError(ExtractionError):
    """Raised when the first page of a listing cannot be loaded."""

    pass
