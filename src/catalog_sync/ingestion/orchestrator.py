"""
Sync orchestrator that coordinates both catalog traversals.

Scrapes the source catalog, then the target catalog (each in its own
browser session), loads the alias table and the exemption list, and
reconciles the two listings.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from catalog_sync.catalog import (
    ComparisonResult,
    ManualOverrideSet,
    ReconciliationEngine,
    TitleMapper,
)
from catalog_sync.config import Settings, get_settings
from catalog_sync.ingestion.extractors import (
    BackloggdScraper,
    CatalogScraper,
    PlayStationStoreScraper,
)
from catalog_sync.ingestion.pagination import TraversalResult
from catalog_sync.logger import get_logger


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    run_id: UUID
    started_at: datetime
    completed_at: datetime
    source: TraversalResult
    target: TraversalResult
    comparison: ComparisonResult
    warnings: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Get total duration in seconds."""
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Summary suitable for JSON output."""
        return {
            "run_id": str(self.run_id),
            "duration_seconds": round(self.duration_seconds, 2),
            "source": _traversal_summary(self.source),
            "target": _traversal_summary(self.target),
            "summary": self.comparison.summary(),
            "has_changes": self.comparison.has_changes,
            "to_add": [e.to_dict() for e in self.comparison.to_add],
            "to_remove": [e.to_dict() for e in self.comparison.to_remove],
            "warnings": self.warnings,
        }


def _traversal_summary(result: TraversalResult) -> dict[str, Any]:
    return {
        "catalog": result.catalog,
        "entries": len(result.entries),
        "expected_total": result.expected_total,
        "pages_visited": result.pages_visited,
        "strategy": result.strategy.value,
        "stop_reason": result.stop_reason.value,
    }


class SyncOrchestrator:
    """
    Orchestrates one source/target synchronization check.

    Traversals run sequentially and never share a browser session.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        source_scraper: CatalogScraper | None = None,
        target_scraper: CatalogScraper | None = None,
        mapper: TitleMapper | None = None,
        overrides: ManualOverrideSet | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._logger = get_logger(__name__, component="orchestrator")
        self._source_scraper = source_scraper or PlayStationStoreScraper(
            self._settings.catalog,
            browser_config=self._settings.browser,
            pagination_config=self._settings.pagination,
            retry_config=self._settings.retry,
        )
        self._target_scraper = target_scraper or BackloggdScraper(
            self._settings.catalog,
            browser_config=self._settings.browser,
            pagination_config=self._settings.pagination,
            retry_config=self._settings.retry,
        )
        self._mapper = mapper
        self._overrides = overrides

    def load_reference_tables(self) -> tuple[TitleMapper, ManualOverrideSet]:
        """Alias table and exemption list, loaded once per run unless injected."""
        if self._mapper is None:
            self._mapper = TitleMapper.from_file(self._settings.mapping.alias_table_path)
        if self._overrides is None:
            self._overrides = ManualOverrideSet.from_file(
                self._settings.mapping.exemption_list_path
            )
        return self._mapper, self._overrides

    async def run(self) -> SyncResult:
        """Scrape both catalogs and reconcile them."""
        run_id = uuid4()
        started_at = datetime.now(timezone.utc)
        logger = self._logger.bind(run_id=str(run_id))

        mapper, overrides = self.load_reference_tables()

        logger.info("Scraping source catalog", url=self._source_scraper.url)
        source = await self._source_scraper.scrape()

        logger.info("Scraping target catalog", url=self._target_scraper.url)
        target = await self._target_scraper.scrape()

        comparison = ReconciliationEngine(mapper, overrides).compare(source.entries, target.entries)

        result = SyncResult(
            run_id=run_id,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            source=source,
            target=target,
            comparison=comparison,
            warnings=[
                f"{traversal.catalog}: {warning}"
                for traversal in (source, target)
                for warning in traversal.warnings
            ],
        )

        logger.info(
            "Sync check complete",
            duration_seconds=result.duration_seconds,
            has_changes=comparison.has_changes,
            **comparison.summary(),
        )
        return result
