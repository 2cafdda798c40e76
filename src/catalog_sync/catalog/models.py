"""
Catalog domain models.

Entries are produced by the extraction adapters and consumed, unchanged,
by the reconciliation engine.
"""

from dataclasses import dataclass, field
from typing import Any

from catalog_sync.catalog.normalize import normalize_title


@dataclass(frozen=True)
class Entry:
    """A single title listed in one catalog."""

    title: str
    platform_tag: str
    source_url: str | None = None
    stable_id: str | None = None
    release_date: str | None = None

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("Entry title must not be empty")

    @property
    def identity_key(self) -> str:
        """Deduplication key within one catalog: URL when known, else normalized title."""
        return self.source_url or normalize_title(self.title)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "title": self.title,
            "platform_tag": self.platform_tag,
            "source_url": self.source_url,
            "stable_id": self.stable_id,
            "release_date": self.release_date,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """
    Three-way diff between the source and target catalogs.

    - to_add:    source entries with no target counterpart
    - to_remove: target entries with no source counterpart (exemptions excluded)
    - in_sync:   source entries present in both catalogs
    """

    to_add: list[Entry] = field(default_factory=list)
    to_remove: list[Entry] = field(default_factory=list)
    in_sync: list[Entry] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Whether the target catalog needs any edit."""
        return bool(self.to_add or self.to_remove)

    def summary(self) -> dict[str, int]:
        """Bucket sizes."""
        return {
            "to_add": len(self.to_add),
            "to_remove": len(self.to_remove),
            "in_sync": len(self.in_sync),
        }
