"""
Ingestion Orchestrator - Drive directory sources into the catalog
"""

import asyncio
import time
from datetime import datetime
from typing import List, Optional

import structlog

from meta_adapter.core.exceptions import MetaAdapterException
from .catalog_store import CatalogStore, normalize_id
from .models import ApiSource, IngestResult, IngestSummary, SourceKind, SourceStatus
from .normalizer import (
    QualityThresholds,
    deduplicate_entries,
    filter_by_quality,
    normalize_raw_entry,
)
from .source_connectors import ConnectorRegistry, get_default_sources

logger = structlog.get_logger(__name__)

INGESTION_BUSY_MESSAGE = "Ingestion already in progress"


class IngestionOrchestrator:
    """Runs sources through normalize -> dedupe -> filter -> store"""

    def __init__(
        self,
        store: CatalogStore,
        connectors: Optional[ConnectorRegistry] = None,
        thresholds: Optional[QualityThresholds] = None,
        sources: Optional[List[ApiSource]] = None
    ):
        self.store = store
        self.connectors = connectors or ConnectorRegistry()
        self.thresholds = thresholds or QualityThresholds.from_settings()
        self._in_progress = False

        for source in sources or get_default_sources():
            self.store.store_source(source)

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def _sources_of_kind(self, kind: SourceKind) -> List[ApiSource]:
        return [s for s in self.store.get_all_sources() if s.kind == kind]

    def _busy_result(self, source_id: str) -> IngestResult:
        logger.warning("Ingestion request rejected", source_id=source_id, reason=INGESTION_BUSY_MESSAGE)
        return IngestResult(source_id=source_id, success=False, errors=[INGESTION_BUSY_MESSAGE])

    async def ingest_from_source(self, source: ApiSource, strict: bool = False) -> IngestResult:
        """
        Ingest a single source into the catalog

        Args:
            source: Source descriptor
            strict: Surface fetch errors instead of falling back to the built-in list

        Returns:
            IngestResult with per-stage counts; failures are captured, never raised
        """
        start = time.perf_counter()
        result = IngestResult(source_id=source.id, success=False)

        try:
            raw_entries = await self.connectors.fetch_raw(source, strict=strict)
            result.apis_found = len(raw_entries)

            normalized = []
            for raw in raw_entries:
                try:
                    entry = normalize_raw_entry(raw, source.id)
                except ValueError as e:
                    logger.warning("Entry rejected on normalization", source_id=source.id, api=raw.api, error=str(e))
                    entry = None
                if entry is None:
                    result.apis_skipped += 1
                else:
                    normalized.append(entry)

            unique = deduplicate_entries(normalized)
            admitted = filter_by_quality(unique, self.thresholds)
            result.apis_skipped += len(unique) - len(admitted)

            for entry in admitted:
                is_new = not self.store.has_api(entry.name)
                if self.store.store_api(entry):
                    if is_new:
                        result.apis_added += 1
                    else:
                        result.apis_updated += 1

            result.success = True
            source.status = SourceStatus.ACTIVE
            source.error = None

        except MetaAdapterException as e:
            result.errors.append(e.message)
            source.status = SourceStatus.ERROR
            source.error = e.message
        except Exception as e:
            result.errors.append(f"{e.__class__.__name__}: {e}")
            source.status = SourceStatus.ERROR
            source.error = str(e)

        self.store.store_source(source)
        result.duration_ms = int((time.perf_counter() - start) * 1000)
        result.timestamp = datetime.utcnow()

        log = logger.info if result.success else logger.error
        log("Source ingestion finished",
            source_id=source.id,
            success=result.success,
            found=result.apis_found,
            added=result.apis_added,
            updated=result.apis_updated,
            skipped=result.apis_skipped,
            errors=result.errors,
            duration_ms=result.duration_ms)

        return result

    async def ingest_all(self) -> List[IngestResult]:
        """Ingest every active source concurrently, isolating per-source failures"""
        if self._in_progress:
            return [self._busy_result("all")]

        self._in_progress = True
        try:
            sources = [s for s in self.store.get_all_sources() if s.status != SourceStatus.DISABLED]
            logger.info("Full ingestion started", sources=[s.id for s in sources])

            outcomes = await asyncio.gather(
                *(self.ingest_from_source(source) for source in sources),
                return_exceptions=True
            )

            results = []
            for source, outcome in zip(sources, outcomes):
                if isinstance(outcome, BaseException):
                    results.append(IngestResult(
                        source_id=source.id,
                        success=False,
                        errors=[f"{outcome.__class__.__name__}: {outcome}"]
                    ))
                else:
                    results.append(outcome)

            self.store.set_last_full_ingest()
            logger.info("Full ingestion completed",
                        total_apis=len(self.store.get_all_apis()),
                        succeeded=sum(1 for r in results if r.success))
            return results
        finally:
            self._in_progress = False

    def _busy_summary(self, source_id: str) -> IngestSummary:
        return IngestSummary(
            success=False,
            total_apis=len(self.store.get_all_apis()),
            errors=self._busy_result(source_id).errors,
        )

    async def quick_ingest(self) -> IngestSummary:
        """Fast path over the built-in source only, no network access"""
        if self._in_progress:
            return self._busy_summary("builtin")

        self._in_progress = True
        try:
            before = {normalize_id(a.name) for a in self.store.get_all_apis()}
            results = [await self.ingest_from_source(s) for s in self._sources_of_kind(SourceKind.BUILTIN)]
            after = {normalize_id(a.name) for a in self.store.get_all_apis()}
        finally:
            self._in_progress = False

        return IngestSummary(
            success=all(r.success for r in results),
            apis_ingested=sum(r.apis_added + r.apis_updated for r in results),
            new_apis=len(after - before),
            total_apis=len(after),
            duration_ms=sum(r.duration_ms for r in results),
            errors=[e for r in results for e in r.errors],
            results=results,
        )

    async def ingest_from_remote(self) -> IngestSummary:
        """Explicit network refresh; fetch errors are reported, not masked"""
        if self._in_progress:
            return self._busy_summary("remote")

        self._in_progress = True
        try:
            before = {normalize_id(a.name) for a in self.store.get_all_apis()}
            results = [
                await self.ingest_from_source(s, strict=True)
                for s in self._sources_of_kind(SourceKind.REMOTE_JSON)
                if s.status != SourceStatus.DISABLED
            ]
            after = {normalize_id(a.name) for a in self.store.get_all_apis()}
        finally:
            self._in_progress = False

        return IngestSummary(
            success=bool(results) and all(r.success for r in results),
            apis_ingested=sum(r.apis_added + r.apis_updated for r in results),
            new_apis=len(after - before),
            total_apis=len(after),
            duration_ms=sum(r.duration_ms for r in results),
            errors=[e for r in results for e in r.errors],
            results=results,
        )
