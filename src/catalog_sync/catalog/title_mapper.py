"""
Title aliases between the source and target catalogs.

Some titles are spelled differently in the two catalogs ("Grand Theft
Auto V" vs "GTA V"). The alias table is loaded once and turned into two
case-insensitive lookup tables, one per direction.
"""

from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from catalog_sync.catalog.contracts import AliasEntry, AliasTableFile
from catalog_sync.logger import get_logger

logger = get_logger(__name__, component="title_mapper")


class TitleMapper:
    """
    Bidirectional, case-insensitive title alias lookup.

    Lookups that miss return the input unchanged. Returned titles keep the
    casing of the alias table. If two aliases share a key, the later one wins.
    """

    def __init__(self, entries: Iterable[AliasEntry] = (), *, version: str | None = None) -> None:
        self._entries: list[AliasEntry] = list(entries)
        self._source_to_target: dict[str, str] = {}
        self._target_to_source: dict[str, str] = {}
        self.version = version

        for entry in self._entries:
            self._source_to_target[entry.source_title.lower()] = entry.target_title
            self._target_to_source[entry.target_title.lower()] = entry.source_title

    @classmethod
    def from_file(cls, path: Path) -> "TitleMapper":
        """
        Load the alias table from a JSON file.

        A missing or malformed file yields an empty mapper, so comparison
        falls back to direct title matching.
        """
        try:
            table = AliasTableFile.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(
                "Failed to load title mappings, comparison will use direct matching only",
                path=str(path),
                error=str(e),
            )
            return cls()

        mapper = cls(table.mappings, version=table.version)
        logger.info("Loaded title mappings", count=len(mapper), version=table.version)
        return mapper

    def map_source_to_target(self, title: str) -> str:
        """Return the target-catalog spelling of a source title."""
        return self._source_to_target.get(title.lower(), title)

    def map_target_to_source(self, title: str) -> str:
        """Return the source-catalog spelling of a target title."""
        return self._target_to_source.get(title.lower(), title)

    def has_source_mapping(self, title: str) -> bool:
        return title.lower() in self._source_to_target

    def has_target_mapping(self, title: str) -> bool:
        return title.lower() in self._target_to_source

    @property
    def mappings(self) -> list[AliasEntry]:
        """Copy of the canonical alias list, in file order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
