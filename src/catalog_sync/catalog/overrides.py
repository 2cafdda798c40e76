"""
Manual overrides for the target catalog.

Some titles belong in the target catalog even though the source listing
never shows them. They are kept in an exemption list so they are not
reported as removals.
"""

from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from catalog_sync.catalog.contracts import ExemptionListFile, OverrideEntry
from catalog_sync.logger import get_logger

logger = get_logger(__name__, component="overrides")


class ManualOverrideSet:
    """Case-insensitive set of target titles exempt from removal."""

    def __init__(self, entries: Iterable[OverrideEntry] = (), *, version: str | None = None) -> None:
        self._entries: list[OverrideEntry] = list(entries)
        self._titles: frozenset[str] = frozenset(e.target_title.lower() for e in self._entries)
        self.version = version

    @classmethod
    def from_file(cls, path: Path) -> "ManualOverrideSet":
        """
        Load the exemption list from a JSON file.

        A missing or malformed file yields an empty set, so every target
        entry is compared normally.
        """
        try:
            table = ExemptionListFile.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(
                "Failed to load manual additions, all target titles will be compared normally",
                path=str(path),
                error=str(e),
            )
            return cls()

        overrides = cls(table.additions, version=table.version)
        logger.info("Loaded manual additions", count=len(overrides), version=table.version)
        return overrides

    def is_exempt(self, target_title: str) -> bool:
        return target_title.lower() in self._titles

    @property
    def entries(self) -> list[OverrideEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
