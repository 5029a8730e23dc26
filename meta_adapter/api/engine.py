"""
Meta-adapter engine - wires the catalog store into every component and
exposes initialization, refresh and status
"""

import asyncio
import time
from typing import Any, Dict, Optional

import httpx

from meta_adapter.core.config import Settings, settings as default_settings
from meta_adapter.core.logging import get_logger
from meta_adapter.api.discovery.capability_registry import CapabilityRegistry
from meta_adapter.api.discovery.catalog_store import CatalogStore
from meta_adapter.api.discovery.flow_composer import FlowComposer
from meta_adapter.api.discovery.health_monitor import CatalogHealthMonitor
from meta_adapter.api.discovery.ingestion import IngestionOrchestrator
from meta_adapter.api.discovery.registry_sync import RegistrySynchronizer
from meta_adapter.api.discovery.source_connectors import ConnectorRegistry
from meta_adapter.api.execution.executor import Executor
from meta_adapter.api.execution.web3 import Web3Executor

logger = get_logger(__name__)


class MetaAdapterEngine:
    """One catalog store shared by ingestion, registry view, flows and execution"""

    def __init__(
        self,
        store: Optional[CatalogStore] = None,
        connectors: Optional[ConnectorRegistry] = None,
        registry: Optional[CapabilityRegistry] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or default_settings
        self.store = store or CatalogStore()

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.settings.REQUEST_TIMEOUT,
            limits=httpx.Limits(max_connections=self.settings.MAX_CONCURRENT_REQUESTS)
        )

        self.orchestrator = IngestionOrchestrator(self.store, connectors=connectors)
        self.synchronizer = RegistrySynchronizer(self.store, registry=registry)
        self.composer = FlowComposer(self.store)
        self.executor = Executor(
            self.synchronizer,
            self.composer,
            client=self.client,
            timeout=self.settings.REQUEST_TIMEOUT,
            flow_timeout=self.settings.FLOW_TIMEOUT
        )
        self.web3 = Web3Executor(settings=self.settings, client=self.client)
        self.health_monitor = CatalogHealthMonitor(self.store, client=self.client)

        self._init_lock = asyncio.Lock()
        self._init_summary: Optional[Dict[str, Any]] = None

    @property
    def initialized(self) -> bool:
        return self._init_summary is not None

    async def _rebuild_views(self) -> Dict[str, Any]:
        """Regenerate flows and republish endpoints after the catalog changed"""
        flows = self.composer.generate_auto_flows()
        sync = await self.synchronizer.sync_all_to_canvas_registry()
        return {
            "flows": len(flows),
            "endpoints": sync["total"],
            "synced": sync["synced"],
            "syncErrors": sync["errors"],
        }

    async def initialize(self) -> Dict[str, Any]:
        """
        Quick-ingest the built-in catalog and derive flows and endpoints

        Concurrent callers wait on the same lock and receive the cached summary
        once the first initialization succeeded.
        """
        async with self._init_lock:
            if self._init_summary is not None:
                return {**self._init_summary, "cached": True}

            start = time.perf_counter()
            ingest = await self.orchestrator.quick_ingest()
            if not ingest.success:
                logger.error("Initialization failed", errors=ingest.errors)
                return {**ingest.to_response(), "cached": False}

            views = await self._rebuild_views()
            summary = {
                "success": True,
                "apisIngested": ingest.apis_ingested,
                "totalApis": ingest.total_apis,
                **views,
                "errors": ingest.errors,
                "durationMs": int((time.perf_counter() - start) * 1000),
            }
            self._init_summary = summary

            logger.info("Meta-adapter initialized",
                        total_apis=summary["totalApis"],
                        endpoints=summary["endpoints"],
                        flows=summary["flows"])
            return {**summary, "cached": False}

    async def refresh(self) -> Dict[str, Any]:
        """Pull the remote directory, then rebuild flows and endpoints"""
        start = time.perf_counter()
        result = await self.orchestrator.ingest_from_remote()
        views = await self._rebuild_views()

        logger.info("Meta-adapter refreshed",
                    success=result.success,
                    new_apis=result.new_apis,
                    total_apis=result.total_apis)
        return {
            **result.to_response(),
            **views,
            "durationMs": int((time.perf_counter() - start) * 1000),
        }

    def status(self) -> Dict[str, Any]:
        return {
            "initialized": self.initialized,
            "ingestionInProgress": self.orchestrator.in_progress,
            "catalog": self.store.get_stats().to_response(),
            "endpoints": self.synchronizer.get_stats(),
            "flows": self.composer.get_flow_stats(),
            "sync": self.synchronizer.get_sync_status(),
            "sources": [s.to_response() for s in self.store.get_all_sources()],
            "health": self.health_monitor.get_health_overview(),
            "web3": self.web3.get_stats(),
        }

    async def close(self):
        await self.orchestrator.connectors.close()
        await self.executor.close()
        await self.web3.close()
        await self.health_monitor.close()
        if self._owns_client:
            await self.client.aclose()


_engine: Optional[MetaAdapterEngine] = None


def get_engine() -> MetaAdapterEngine:
    """FastAPI dependency returning the process-wide engine"""
    global _engine
    if _engine is None:
        _engine = MetaAdapterEngine()
    return _engine
