"""
Catalog Health Monitor - Probes cataloged APIs and records their health
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import structlog
from pydantic import Field

from meta_adapter.core.config import settings
from .catalog_store import CatalogStore
from .models import CamelModel, CatalogEntry, HealthStatus

logger = structlog.get_logger(__name__)


class HealthCheckResult(CamelModel):
    """Result of probing one API"""
    api_name: str
    url: str
    status: HealthStatus
    response_time_ms: int
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


def status_from_code(status_code: int) -> HealthStatus:
    if 200 <= status_code < 400:
        return HealthStatus.HEALTHY
    if status_code in (429, 503):
        return HealthStatus.DEGRADED
    return HealthStatus.OFFLINE


class CatalogHealthMonitor:
    """Checks every catalog entry's base URL with bounded concurrency"""

    def __init__(
        self,
        store: CatalogStore,
        client: Optional[httpx.AsyncClient] = None,
        concurrency: Optional[int] = None
    ):
        self.store = store
        self.concurrency = concurrency or settings.HEALTH_CHECK_CONCURRENCY
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=settings.REQUEST_TIMEOUT,
            limits=httpx.Limits(max_connections=settings.MAX_CONCURRENT_REQUESTS)
        )
        self.last_run: Optional[datetime] = None

    async def check_api(self, api: CatalogEntry) -> HealthCheckResult:
        """
        Probe a single API and write the observation to the store

        Args:
            api: Catalog entry to probe

        Returns:
            HealthCheckResult
        """
        start_time = datetime.utcnow()

        try:
            response = await self.client.get(
                api.base_url,
                headers={"User-Agent": settings.USER_AGENT},
                follow_redirects=False
            )
            result = HealthCheckResult(
                api_name=api.name,
                url=api.base_url,
                status=status_from_code(response.status_code),
                response_time_ms=self._elapsed_ms(start_time),
                status_code=response.status_code,
            )

        except httpx.TimeoutException:
            result = HealthCheckResult(
                api_name=api.name,
                url=api.base_url,
                status=HealthStatus.OFFLINE,
                response_time_ms=self._elapsed_ms(start_time),
                error_message="Request timeout"
            )

        except httpx.ConnectError:
            result = HealthCheckResult(
                api_name=api.name,
                url=api.base_url,
                status=HealthStatus.OFFLINE,
                response_time_ms=self._elapsed_ms(start_time),
                error_message="Connection error"
            )

        except Exception as e:
            result = HealthCheckResult(
                api_name=api.name,
                url=api.base_url,
                status=HealthStatus.OFFLINE,
                response_time_ms=self._elapsed_ms(start_time),
                error_message=str(e)
            )

        self.store.update_health(api.name, result.status)

        logger.debug("Health check completed",
                     api_name=api.name,
                     status=result.status.value,
                     response_time=result.response_time_ms,
                     error=result.error_message)

        return result

    async def check_all(self, names: Optional[List[str]] = None) -> Dict[str, Any]:
        """Probe the whole catalog (or the named subset) and summarize"""
        apis = self.store.get_all_apis()
        if names:
            wanted = {n.lower() for n in names}
            apis = [a for a in apis if a.name.lower() in wanted]

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(api: CatalogEntry) -> HealthCheckResult:
            async with semaphore:
                return await self.check_api(api)

        results = await asyncio.gather(*(bounded(api) for api in apis))
        self.last_run = datetime.utcnow()

        summary = self.summarize(results)
        logger.info("Catalog health check completed",
                    checked=summary["checked"],
                    healthy=summary["healthy"],
                    degraded=summary["degraded"],
                    offline=summary["offline"])
        return summary

    def summarize(self, results: List[HealthCheckResult]) -> Dict[str, Any]:
        counts = {status: 0 for status in HealthStatus}
        for result in results:
            counts[result.status] += 1

        return {
            "checked": len(results),
            "healthy": counts[HealthStatus.HEALTHY],
            "degraded": counts[HealthStatus.DEGRADED],
            "offline": counts[HealthStatus.OFFLINE],
            "timestamp": (self.last_run or datetime.utcnow()).isoformat(),
            "results": [r.to_response() for r in results],
        }

    def get_health_overview(self) -> Dict[str, Any]:
        """Current health distribution as recorded in the store"""
        by_status: Dict[str, int] = {status.value: 0 for status in HealthStatus}
        for api in self.store.get_all_apis():
            by_status[api.health_status.value] += 1

        return {
            "totalApis": sum(by_status.values()),
            "byStatus": by_status,
            "lastRun": self.last_run.isoformat() if self.last_run else None,
        }

    @staticmethod
    def _elapsed_ms(start_time: datetime) -> int:
        return int((datetime.utcnow() - start_time).total_seconds() * 1000)

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
