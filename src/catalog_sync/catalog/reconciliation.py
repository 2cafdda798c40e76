"""
Reconciliation of the source and target catalogs.

Matching is exact on the normalized key of the (alias-mapped) title;
there is no partial or fuzzy matching.
"""

from collections.abc import Sequence

from catalog_sync.catalog.models import ComparisonResult, Entry
from catalog_sync.catalog.normalize import normalize_title
from catalog_sync.catalog.overrides import ManualOverrideSet
from catalog_sync.catalog.title_mapper import TitleMapper
from catalog_sync.logger import get_logger


class ReconciliationEngine:
    """
    Computes the three-way diff between two complete entry lists.

    Source titles are translated into the target vocabulary through the
    TitleMapper before normalization. Target entries without a source
    counterpart are reported for removal unless the ManualOverrideSet
    exempts them. Each bucket keeps the order of its input list.
    """

    def __init__(
        self,
        mapper: TitleMapper | None = None,
        overrides: ManualOverrideSet | None = None,
    ) -> None:
        self._mapper = mapper or TitleMapper()
        self._overrides = overrides or ManualOverrideSet()
        self._logger = get_logger(__name__, component="reconciliation")

    def source_key(self, entry: Entry) -> str:
        """Comparison key of a source entry, in target vocabulary."""
        return normalize_title(self._mapper.map_source_to_target(entry.title))

    def compare(self, source: Sequence[Entry], target: Sequence[Entry]) -> ComparisonResult:
        """
        Compare the source catalog against the target catalog.

        Args:
            source: Complete source catalog entries
            target: Complete target catalog entries

        Returns:
            ComparisonResult with to_add, to_remove and in_sync buckets
        """
        target_keys = {normalize_title(entry.title) for entry in target}
        source_keys = {self.source_key(entry) for entry in source}

        to_add: list[Entry] = []
        in_sync: list[Entry] = []
        for entry in source:
            if self.source_key(entry) in target_keys:
                in_sync.append(entry)
            else:
                to_add.append(entry)

        to_remove: list[Entry] = []
        exempted = 0
        for entry in target:
            if normalize_title(entry.title) in source_keys:
                continue
            if self._overrides.is_exempt(entry.title):
                exempted += 1
                continue
            to_remove.append(entry)

        result = ComparisonResult(to_add=to_add, to_remove=to_remove, in_sync=in_sync)

        self._logger.info(
            "Comparison complete",
            source_total=len(source),
            target_total=len(target),
            exempted=exempted,
            **result.summary(),
        )
        return result


def compare_catalogs(
    source: Sequence[Entry],
    target: Sequence[Entry],
    mapper: TitleMapper | None = None,
    overrides: ManualOverrideSet | None = None,
) -> ComparisonResult:
    """Convenience wrapper around ReconciliationEngine.compare."""
    return ReconciliationEngine(mapper, overrides).compare(source, target)
