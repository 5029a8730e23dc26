"""
Catalog health endpoints - health overview and on-demand probes of cataloged APIs
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from meta_adapter.core.exceptions import internal_server_exception
from meta_adapter.core.logging import get_logger
from meta_adapter.api.discovery.models import CamelModel
from meta_adapter.api.engine import MetaAdapterEngine, get_engine

logger = get_logger(__name__)
router = APIRouter()


class HealthCheckRequest(CamelModel):
    apis: Optional[List[str]] = None


@router.get("")
async def catalog_health(engine: MetaAdapterEngine = Depends(get_engine)):
    """Health distribution of the catalog as last observed."""
    logger.info("Catalog health requested")
    return {"ok": True, **engine.health_monitor.get_health_overview()}


@router.post("/check")
async def run_health_check(
    request: Optional[HealthCheckRequest] = None,
    engine: MetaAdapterEngine = Depends(get_engine)
):
    """Probe cataloged APIs now and record the results."""
    try:
        summary = await engine.health_monitor.check_all(request.apis if request else None)
        return {"ok": True, **summary}
    except Exception as e:
        logger.error("Catalog health check failed", error=str(e))
        raise internal_server_exception(f"Health check failed: {str(e)}")
