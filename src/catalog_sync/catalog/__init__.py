"""
Catalog reconciliation.

Title normalization, alias mapping, manual overrides and the
three-way diff between the source and target catalogs.
"""

from catalog_sync.catalog.contracts import AliasEntry, OverrideEntry
from catalog_sync.catalog.models import ComparisonResult, Entry
from catalog_sync.catalog.normalize import normalize_title
from catalog_sync.catalog.overrides import ManualOverrideSet
from catalog_sync.catalog.reconciliation import ReconciliationEngine, compare_catalogs
from catalog_sync.catalog.title_mapper import TitleMapper

__all__ = [
    "AliasEntry",
    "ComparisonResult",
    "Entry",
    "ManualOverrideSet",
    "OverrideEntry",
    "ReconciliationEngine",
    "TitleMapper",
    "compare_catalogs",
    "normalize_title",
]
