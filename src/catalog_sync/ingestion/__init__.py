"""
Catalog ingestion.

Browser sessions, the pagination-driven extraction loop, the
per-catalog extractors and the sync orchestrator.
"""

from catalog_sync.ingestion.driver import ElementSnapshot, PageDriver, PlaywrightPageDriver
from catalog_sync.ingestion.errors import ExtractionError, NavigationError, SessionError
from catalog_sync.ingestion.pagination import (
    PaginationController,
    PaginationState,
    PaginationStrategy,
    StopReason,
    TraversalResult,
)

__all__ = [
    "ElementSnapshot",
    "ExtractionError",
    "NavigationError",
    "PageDriver",
    "PaginationController",
    "PaginationState",
    "PaginationStrategy",
    "PlaywrightPageDriver",
    "SessionError",
    "StopReason",
    "TraversalResult",
]
