"""
Execution Engine - Call auto-registered endpoints and run flows against live APIs
"""

import asyncio
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import Field

from meta_adapter.core.config import settings
from meta_adapter.api.discovery.flow_composer import FlowComposer
from meta_adapter.api.discovery.models import AuthMode, AutoFlow, AutoFlowStep, CamelModel
from meta_adapter.api.discovery.normalizer import PLACEHOLDER_PATTERN
from meta_adapter.api.discovery.registry_sync import RegistrySynchronizer

logger = structlog.get_logger(__name__)

DEMO_ENDPOINT_LIMIT = 3


class ExecutionResult(CamelModel):
    """Outcome of one outbound call"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    duration_ms: int = 0
    api_name: str
    endpoint: str
    status_code: Optional[int] = None
    missing_params: List[str] = Field(default_factory=list)


class FlowExecutionResult(CamelModel):
    success: bool
    flow_id: str
    flow_name: str
    steps: List[ExecutionResult] = Field(default_factory=list)
    total_duration_ms: int = 0
    parallel: bool = False
    timed_out: bool = False
    error: Optional[str] = None


def substitute_params(path: str, params: Dict[str, Any]) -> str:
    """Replace {name} tokens with URL-encoded values; unknown tokens stay literal"""

    def replace(match):
        name = match.group(1)
        if name not in params or params[name] is None:
            return match.group(0)
        return quote(str(params[name]), safe="")

    return PLACEHOLDER_PATTERN.sub(replace, path)


def missing_required(required: List[str], params: Dict[str, Any]) -> List[str]:
    return [name for name in required if params.get(name) is None or params.get(name) == ""]


def parse_response_body(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        return response.json()
    if "text/" in content_type:
        return response.text
    return {
        "url": str(response.request.url),
        "status": response.status_code,
        "contentType": content_type,
    }


def elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class Executor:
    """Runs endpoints and flows resolved through the registry view"""

    def __init__(
        self,
        synchronizer: RegistrySynchronizer,
        composer: FlowComposer,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        flow_timeout: Optional[float] = None
    ):
        self.synchronizer = synchronizer
        self.composer = composer
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.flow_timeout = flow_timeout or settings.FLOW_TIMEOUT
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.timeout,
            limits=httpx.Limits(max_connections=settings.MAX_CONCURRENT_REQUESTS)
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": settings.USER_AGENT,
            "Accept": "application/json",
        }

    async def execute_endpoint(self, key: str, params: Optional[Dict[str, Any]] = None) -> ExecutionResult:
        """
        Execute a single auto-registered endpoint

        Args:
            key: Endpoint key (public.<api>.<endpoint>)
            params: Values for the endpoint's path and query placeholders

        Returns:
            ExecutionResult; failures are captured, never raised
        """
        start = time.perf_counter()
        params = params or {}

        endpoint = self.synchronizer.get_endpoint(key)
        if endpoint is None:
            return ExecutionResult(
                success=False,
                error=f"Endpoint not found: {key}",
                duration_ms=elapsed_ms(start),
                api_name="unknown",
                endpoint=key,
            )

        missing = missing_required(endpoint.required_args, params)
        if missing:
            return ExecutionResult(
                success=False,
                error=f"Missing required parameters: {', '.join(missing)}",
                duration_ms=elapsed_ms(start),
                api_name=endpoint.api_name,
                endpoint=endpoint.fn,
                missing_params=missing,
            )

        url = f"{endpoint.base_url}{substitute_params(endpoint.path, params)}"

        try:
            response = await asyncio.wait_for(
                self.client.request(endpoint.method, url, headers=self.headers),
                timeout=self.timeout
            )
            if not response.is_success:
                return ExecutionResult(
                    success=False,
                    error=f"HTTP {response.status_code}: {response.reason_phrase}",
                    duration_ms=elapsed_ms(start),
                    api_name=endpoint.api_name,
                    endpoint=endpoint.fn,
                    status_code=response.status_code,
                )

            return ExecutionResult(
                success=True,
                data=parse_response_body(response),
                duration_ms=elapsed_ms(start),
                api_name=endpoint.api_name,
                endpoint=endpoint.fn,
                status_code=response.status_code,
            )

        except asyncio.TimeoutError:
            error = f"Request timed out after {self.timeout}s"
        except httpx.HTTPError as e:
            error = f"{e.__class__.__name__}: {e}"
        except ValueError as e:
            error = f"Invalid response body: {e}"

        logger.warning("Endpoint execution failed", key=key, url=url, error=error)
        return ExecutionResult(
            success=False,
            error=error,
            duration_ms=elapsed_ms(start),
            api_name=endpoint.api_name,
            endpoint=endpoint.fn,
        )

    @staticmethod
    def step_params(step: AutoFlowStep, params: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """Fixed step params overlaid with caller params keyed by step id, then endpoint key"""
        merged = dict(step.params)
        merged.update(params.get(step.id) or params.get(step.endpoint_key) or {})
        return merged

    def _unknown_flow(self, flow_id: str, parallel: bool) -> FlowExecutionResult:
        return FlowExecutionResult(
            success=False,
            flow_id=flow_id,
            flow_name="Unknown",
            parallel=parallel,
            error=f"Flow not found: {flow_id}",
        )

    def _deadline_result(self, step: AutoFlowStep, start: float) -> ExecutionResult:
        endpoint = self.synchronizer.get_endpoint(step.endpoint_key)
        return ExecutionResult(
            success=False,
            error=f"Flow deadline of {self.flow_timeout}s exceeded",
            duration_ms=elapsed_ms(start),
            api_name=endpoint.api_name if endpoint else "unknown",
            endpoint=endpoint.fn if endpoint else step.endpoint_key,
        )

    async def execute_flow(
        self,
        flow_id: str,
        params: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> FlowExecutionResult:
        """
        Run a flow's steps in order

        A failed required step stops the flow; optional step failures are
        recorded and the flow continues.
        """
        flow = self.composer.get_flow(flow_id)
        if flow is None:
            return self._unknown_flow(flow_id, parallel=False)

        params = params or {}
        start = time.perf_counter()
        results: List[ExecutionResult] = []
        timed_out = False

        for step in flow.steps:
            remaining = self.flow_timeout - (time.perf_counter() - start)
            try:
                result = await asyncio.wait_for(
                    self.execute_endpoint(step.endpoint_key, self.step_params(step, params)),
                    timeout=remaining
                )
            except asyncio.TimeoutError:
                results.append(self._deadline_result(step, start))
                timed_out = True
                break

            results.append(result)
            if not result.success and not step.optional:
                break

        return self._flow_result(flow, results, start, parallel=False, timed_out=timed_out)

    async def execute_parallel_flow(
        self,
        flow_id: str,
        params: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> FlowExecutionResult:
        """Run every step of a flow concurrently"""
        flow = self.composer.get_flow(flow_id)
        if flow is None:
            return self._unknown_flow(flow_id, parallel=True)

        params = params or {}
        start = time.perf_counter()

        tasks = [
            asyncio.ensure_future(self.execute_endpoint(step.endpoint_key, self.step_params(step, params)))
            for step in flow.steps
        ]
        pending = set()
        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=self.flow_timeout)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        results = []
        for step, task in zip(flow.steps, tasks):
            if task in pending:
                results.append(self._deadline_result(step, start))
            else:
                results.append(task.result())

        return self._flow_result(flow, results, start, parallel=True, timed_out=bool(pending))

    def _flow_result(
        self,
        flow: AutoFlow,
        results: List[ExecutionResult],
        start: float,
        parallel: bool,
        timed_out: bool
    ) -> FlowExecutionResult:
        result = FlowExecutionResult(
            success=all(r.success for r in results),
            flow_id=flow.id,
            flow_name=flow.name,
            steps=results,
            total_duration_ms=elapsed_ms(start),
            parallel=parallel,
            timed_out=timed_out,
        )

        logger.info("Flow executed",
                    flow_id=flow.id,
                    parallel=parallel,
                    steps=len(results),
                    success=result.success,
                    timed_out=timed_out,
                    duration_ms=result.total_duration_ms)
        return result

    async def quick_demo(self) -> Dict[str, Any]:
        """Call a few no-auth endpoints that need no parameters"""
        start = time.perf_counter()
        candidates = [
            ep for ep in self.synchronizer.no_auth_endpoints()
            if not ep.required_args
        ][:DEMO_ENDPOINT_LIMIT]

        results = [await self.execute_endpoint(ep.key) for ep in candidates]
        succeeded = sum(1 for r in results if r.success)

        return {
            "success": succeeded > 0,
            "message": f"Executed {succeeded}/{len(results)} API calls successfully",
            "results": [r.to_response() for r in results],
            "durationMs": elapsed_ms(start),
        }

    def executable_endpoints(self) -> List[Dict[str, Any]]:
        return [
            {
                "key": ep.key,
                "name": ep.api_name,
                "endpoint": ep.fn,
                "description": ep.description,
                "category": ep.category,
                "requiredParams": ep.required_args,
            }
            for ep in self.synchronizer.all_auto_endpoints()
            if ep.auth == AuthMode.NONE
        ]

    def executable_flows(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": f.id,
                "name": f.name,
                "description": f.description,
                "steps": len(f.steps),
                "categories": f.categories,
            }
            for f in self.composer.list_auto_flows()
        ]

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
