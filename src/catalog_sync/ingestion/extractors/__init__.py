"""
Catalog extractors.

One ExtractionAdapter per catalog source, plus the scrapers that drive
them through a browser session and the PaginationController.
"""

from catalog_sync.ingestion.errors import ExtractionError, NavigationError, SessionError
from catalog_sync.ingestion.extractors.backloggd import BackloggdAdapter, BackloggdScraper
from catalog_sync.ingestion.extractors.base import (
    CatalogScraper,
    ExtractionAdapter,
    clean_title,
)
from catalog_sync.ingestion.extractors.playstation_store import (
    PlayStationStoreAdapter,
    PlayStationStoreScraper,
)

__all__ = [
    # Base classes and errors
    "CatalogScraper",
    "ExtractionAdapter",
    "ExtractionError",
    "NavigationError",
    "SessionError",
    "clean_title",
    # Catalogs
    "BackloggdAdapter",
    "BackloggdScraper",
    "PlayStationStoreAdapter",
    "PlayStationStoreScraper",
]
