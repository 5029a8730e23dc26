"""
Web3 endpoints - chain-data provider calls and wallet flows
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from meta_adapter.core.exceptions import (
    bad_request_exception,
    internal_server_exception,
    not_found_exception,
)
from meta_adapter.core.logging import get_logger
from meta_adapter.api.discovery.models import CamelModel
from meta_adapter.api.engine import MetaAdapterEngine, get_engine
from meta_adapter.api.execution.web3 import DEMO_WALLET_ADDRESS

logger = get_logger(__name__)
router = APIRouter()


class Web3ExecuteRequest(CamelModel):
    key: Optional[str] = None
    params: Dict[str, Any] = {}


class Web3FlowRequest(CamelModel):
    flow_id: Optional[str] = None
    address: Optional[str] = None
    chain: Optional[str] = None


@router.get("/status")
async def web3_status(engine: MetaAdapterEngine = Depends(get_engine)):
    return {
        "ok": True,
        **engine.web3.get_stats(),
        "endpoints": engine.web3.list_endpoints(),
        "flows": [
            {"id": f.id, "name": f.name, "description": f.description, "steps": len(f.steps)}
            for f in engine.web3.list_flows()
        ],
    }


@router.get("/endpoints")
async def web3_endpoints(engine: MetaAdapterEngine = Depends(get_engine)):
    endpoints = engine.web3.list_endpoints()
    return {"ok": True, "endpoints": endpoints, "count": len(endpoints)}


@router.get("/flows")
async def web3_flows(engine: MetaAdapterEngine = Depends(get_engine)):
    flows = engine.web3.list_flows()
    return {"ok": True, "flows": [f.model_dump() for f in flows], "count": len(flows)}


@router.get("/flows/{flow_id}")
async def web3_flow_detail(flow_id: str, engine: MetaAdapterEngine = Depends(get_engine)):
    flow = engine.web3.get_flow(flow_id)
    if flow is None:
        raise not_found_exception(f"Web3 flow not found: {flow_id}")
    return {"ok": True, "flow": flow.model_dump()}


@router.post("/execute")
async def web3_execute(request: Web3ExecuteRequest, engine: MetaAdapterEngine = Depends(get_engine)):
    if not request.key:
        raise bad_request_exception("Endpoint key is required")

    try:
        result = await engine.web3.execute_web3_endpoint(request.key, request.params)
        return {"ok": result.success, **result.to_response()}
    except Exception as e:
        logger.error("Web3 execution failed", key=request.key, error=str(e))
        raise internal_server_exception(f"Web3 execution failed: {str(e)}")


@router.post("/flow")
async def web3_flow(request: Web3FlowRequest, engine: MetaAdapterEngine = Depends(get_engine)):
    if not request.flow_id:
        raise bad_request_exception("Flow ID is required")
    if not request.address:
        raise bad_request_exception("Wallet address is required")
    if engine.web3.get_flow(request.flow_id) is None:
        raise not_found_exception(f"Web3 flow not found: {request.flow_id}")

    try:
        result = await engine.web3.execute_web3_flow(request.flow_id, request.address, request.chain)
        return result.to_response()
    except Exception as e:
        logger.error("Web3 flow execution failed", flow_id=request.flow_id, error=str(e))
        raise internal_server_exception(f"Web3 flow execution failed: {str(e)}")


@router.get("/demo")
async def web3_demo(
    address: str = Query(DEMO_WALLET_ADDRESS, description="Wallet address"),
    engine: MetaAdapterEngine = Depends(get_engine)
):
    try:
        result = await engine.web3.web3_demo(address)
        return {"ok": result["success"], **result}
    except Exception as e:
        logger.error("Web3 demo failed", address=address, error=str(e))
        raise internal_server_exception(f"Web3 demo failed: {str(e)}")
