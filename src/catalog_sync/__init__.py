"""
Catalog Sync.

Keeps a public game list in step with a storefront category by
scraping both listings and computing what to add and what to remove.
"""

from catalog_sync.config import Settings, get_settings
from catalog_sync.logger import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
