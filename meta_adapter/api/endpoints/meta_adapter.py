"""
Meta-adapter endpoints - catalog, auto endpoints, flows and execution
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from meta_adapter.core.config import settings
from meta_adapter.core.exceptions import (
    bad_request_exception,
    internal_server_exception,
    not_found_exception,
)
from meta_adapter.core.logging import get_logger
from meta_adapter.api.discovery.models import CamelModel
from meta_adapter.api.engine import MetaAdapterEngine, get_engine

logger = get_logger(__name__)
router = APIRouter()

HELP_CATEGORIES = [
    "Weather", "Entertainment", "Cryptocurrency", "Animals", "Science",
    "Games", "Food & Drink", "Calendar", "Books", "Geocoding", "Open Data",
]


class ExecuteRequest(CamelModel):
    key: Optional[str] = None
    params: Dict[str, Any] = {}


class FlowRequest(CamelModel):
    flow_id: Optional[str] = None
    params: Dict[str, Dict[str, Any]] = {}
    parallel: bool = False


class ComposeRequest(CamelModel):
    categories: List[str] = []


def _help_text() -> str:
    base = f"{settings.API_V1_STR}/meta"
    return "\n".join([
        "Meta-Adapter - Auto-integrated Public APIs",
        "",
        "Ingests free public APIs and exposes them as callable endpoints and flows.",
        "",
        "Endpoints:",
        f"- GET  {base}/status - Status and stats",
        f"- POST {base}/init - Ingest the built-in catalog",
        f"- POST {base}/refresh - Refresh from external sources",
        f"- GET  {base}/apis - List all cataloged APIs",
        f"- GET  {base}/apis/search?q=weather - Search APIs",
        f"- GET  {base}/apis/category/{{category}} - APIs by category",
        f"- GET  {base}/endpoints - List all auto-registered endpoints",
        f"- GET  {base}/endpoints/{{key}} - Endpoint details",
        f"- GET  {base}/flows - List auto-generated flows",
        f"- GET  {base}/flows/{{id}} - Flow details",
        f"- POST {base}/flows/compose - Compose a flow from categories {{categories}}",
        f"- POST {base}/execute - Execute an endpoint {{key, params?}}",
        f"- POST {base}/flow - Execute a flow {{flowId, params?, parallel?}}",
        f"- GET  {base}/demo - Quick demo of API calls",
        f"- GET  {base}/health - Catalog health overview",
        "",
        f"Categories: {', '.join(HELP_CATEGORIES)}",
        "",
        "Example flows:",
        "- weather-and-joke: Weather + random joke",
        "- crypto-and-news: Crypto prices + holidays",
        "- fun-facts: Dog pic + cat fact + quote",
        "- morning-brief: Weather + holiday + quote",
    ])


@router.get("/status")
async def get_status(engine: MetaAdapterEngine = Depends(get_engine)):
    """Catalog, endpoint, flow and sync statistics"""
    try:
        return {"ok": True, **engine.status()}
    except Exception as e:
        logger.error("Failed to get status", error=str(e))
        raise internal_server_exception(f"Failed to get status: {str(e)}")


@router.get("/help")
async def get_help():
    return {"ok": True, "help": _help_text(), "categories": HELP_CATEGORIES}


@router.post("/init")
async def initialize(engine: MetaAdapterEngine = Depends(get_engine)):
    try:
        result = await engine.initialize()
        return {"ok": result["success"], **result}
    except Exception as e:
        logger.error("Initialization failed", error=str(e))
        raise internal_server_exception(f"Init failed: {str(e)}")


@router.post("/refresh")
async def refresh(engine: MetaAdapterEngine = Depends(get_engine)):
    try:
        result = await engine.refresh()
        return {"ok": result["success"], **result}
    except Exception as e:
        logger.error("Refresh failed", error=str(e))
        raise internal_server_exception(f"Refresh failed: {str(e)}")


# Catalog

@router.get("/apis")
async def list_apis(engine: MetaAdapterEngine = Depends(get_engine)):
    apis = engine.store.get_all_apis()
    return {
        "ok": True,
        "apis": [
            {
                "name": a.name,
                "description": a.description,
                "category": a.category,
                "auth": a.auth.value,
                "baseUrl": a.base_url,
                "endpoints": len(a.endpoints),
                "qualityScore": a.quality_score,
                "healthStatus": a.health_status.value,
            }
            for a in apis
        ],
        "count": len(apis),
    }


@router.get("/apis/search")
async def search_apis(
    q: str = Query("", description="Search query"),
    engine: MetaAdapterEngine = Depends(get_engine)
):
    apis = engine.store.search_apis(q)
    return {
        "ok": True,
        "query": q,
        "apis": [
            {"name": a.name, "description": a.description, "category": a.category, "auth": a.auth.value}
            for a in apis
        ],
        "count": len(apis),
    }


@router.get("/apis/category/{category}")
async def apis_by_category(category: str, engine: MetaAdapterEngine = Depends(get_engine)):
    apis = engine.store.get_apis_by_category(category)
    return {
        "ok": True,
        "category": category,
        "apis": [
            {"name": a.name, "description": a.description, "auth": a.auth.value}
            for a in apis
        ],
        "count": len(apis),
    }


# Auto endpoints

@router.get("/endpoints")
async def list_endpoints(engine: MetaAdapterEngine = Depends(get_engine)):
    endpoints = engine.synchronizer.all_auto_endpoints()
    return {
        "ok": True,
        "endpoints": [
            {
                "key": e.key,
                "apiName": e.api_name,
                "endpoint": e.fn,
                "description": e.description,
                "category": e.category,
                "auth": e.auth.value,
            }
            for e in endpoints
        ],
        "count": len(endpoints),
    }


@router.get("/endpoints/search")
async def search_endpoints(
    q: str = Query("", description="Search query"),
    engine: MetaAdapterEngine = Depends(get_engine)
):
    endpoints = engine.synchronizer.search(q)
    return {
        "ok": True,
        "query": q,
        "endpoints": [
            {"key": e.key, "apiName": e.api_name, "description": e.description, "category": e.category}
            for e in endpoints
        ],
        "count": len(endpoints),
    }


@router.get("/endpoints/{key}")
async def get_endpoint(key: str, engine: MetaAdapterEngine = Depends(get_engine)):
    """Endpoint detail; dashes in the path stand in for dots"""
    key = key.replace("-", ".")
    endpoint = engine.synchronizer.get_endpoint(key)
    if endpoint is None:
        raise not_found_exception(f"Endpoint not found: {key}")

    return {
        "ok": True,
        "endpoint": endpoint.to_response(),
        "description": engine.synchronizer.describe_endpoint(key),
    }


# Flows

@router.get("/flows")
async def list_flows(engine: MetaAdapterEngine = Depends(get_engine)):
    flows = engine.composer.list_auto_flows()
    return {
        "ok": True,
        "flows": [
            {
                "id": f.id,
                "name": f.name,
                "description": f.description,
                "steps": len(f.steps),
                "categories": f.categories,
            }
            for f in flows
        ],
        "count": len(flows),
        "stats": engine.composer.get_flow_stats(),
        "templates": engine.composer.available_templates(),
    }


@router.post("/flows/compose")
async def compose_flow(request: ComposeRequest, engine: MetaAdapterEngine = Depends(get_engine)):
    """Compose an ad hoc flow from the first no-auth API of each category"""
    if len(request.categories) < 2:
        raise bad_request_exception("At least two categories are required")

    flow = engine.composer.generate_category_flow(request.categories)
    if flow is None:
        return {
            "ok": False,
            "error": f"Not enough no-auth APIs for categories: {', '.join(request.categories)}",
        }

    return {"ok": True, "flow": flow.to_response(), "description": engine.composer.describe_flow(flow.id)}


@router.get("/flows/{flow_id}")
async def get_flow(flow_id: str, engine: MetaAdapterEngine = Depends(get_engine)):
    flow = engine.composer.get_flow(flow_id)
    if flow is None:
        raise not_found_exception(f"Flow not found: {flow_id}")

    return {
        "ok": True,
        "flow": flow.to_response(),
        "description": engine.composer.describe_flow(flow_id),
    }


# Execution

@router.post("/execute")
async def execute_endpoint(request: ExecuteRequest, engine: MetaAdapterEngine = Depends(get_engine)):
    if not request.key:
        raise bad_request_exception("Endpoint key is required")

    try:
        result = await engine.executor.execute_endpoint(request.key, request.params)
        return {"ok": result.success, **result.to_response()}
    except Exception as e:
        logger.error("Endpoint execution failed", key=request.key, error=str(e))
        raise internal_server_exception(f"Execution failed: {str(e)}")


@router.post("/flow")
async def execute_flow(request: FlowRequest, engine: MetaAdapterEngine = Depends(get_engine)):
    if not request.flow_id:
        raise bad_request_exception("Flow ID is required")

    try:
        if request.parallel:
            result = await engine.executor.execute_parallel_flow(request.flow_id, request.params)
        else:
            result = await engine.executor.execute_flow(request.flow_id, request.params)
        return {"ok": result.success, **result.to_response()}
    except Exception as e:
        logger.error("Flow execution failed", flow_id=request.flow_id, error=str(e))
        raise internal_server_exception(f"Flow execution failed: {str(e)}")


@router.get("/demo")
async def demo(engine: MetaAdapterEngine = Depends(get_engine)):
    try:
        result = await engine.executor.quick_demo()
        return {"ok": result["success"], **result}
    except Exception as e:
        logger.error("Demo failed", error=str(e))
        raise internal_server_exception(f"Demo failed: {str(e)}")


@router.get("/executable")
async def executable(engine: MetaAdapterEngine = Depends(get_engine)):
    return {
        "ok": True,
        "endpoints": engine.executor.executable_endpoints(),
        "flows": engine.executor.executable_flows(),
    }
