import asyncio
import inspect
from typing import Any, Callable, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from meta_adapter.main import app
from meta_adapter.core.config import Settings
from meta_adapter.api.engine import MetaAdapterEngine, get_engine
from meta_adapter.api.discovery.catalog_store import CatalogStore
from meta_adapter.api.discovery.normalizer import normalize_raw_entry
from meta_adapter.api.discovery.source_connectors import (
    BuiltinSourceConnector,
    ConnectorRegistry,
    RemoteJsonSourceConnector,
    get_builtin_public_apis,
)


class UpstreamStub:
    """Answers outbound requests from a table of URL prefixes; latest match wins."""

    def __init__(self):
        self.routes: List[Tuple[str, Callable]] = []
        self.requests: List[httpx.Request] = []

    def add(
        self,
        prefix: str,
        status_code: int = 200,
        json: Any = None,
        text: Optional[str] = None,
        delay: float = 0.0
    ):
        async def respond(request: httpx.Request) -> httpx.Response:
            if delay:
                await asyncio.sleep(delay)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json if json is not None else {})

        self.routes.append((prefix, respond))

    def add_handler(self, prefix: str, handler: Callable):
        self.routes.append((prefix, handler))

    def urls(self) -> List[str]:
        return [str(r.url) for r in self.requests]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        for prefix, handler in reversed(self.routes):
            if url.startswith(prefix):
                result = handler(request)
                if inspect.isawaitable(result):
                    result = await result
                return result
        return httpx.Response(200, json={"ok": True, "url": url})


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def test_settings():
    """Settings isolated from the environment, no provider keys configured."""
    return Settings(
        _env_file=None,
        MORALIS_API_KEY=None,
        ALCHEMY_API_KEY=None,
        HELIUS_API_KEY=None,
    )


@pytest.fixture
def store():
    return CatalogStore()


@pytest.fixture
def catalog(store):
    """Store pre-loaded with the normalized built-in directory."""
    for raw in get_builtin_public_apis():
        entry = normalize_raw_entry(raw, "builtin-curated")
        if entry is not None:
            store.store_api(entry)
    return store


@pytest.fixture
def connectors(http_client):
    return ConnectorRegistry([
        BuiltinSourceConnector(),
        RemoteJsonSourceConnector(client=http_client),
    ])


@pytest.fixture
def engine(store, connectors, http_client, test_settings):
    return MetaAdapterEngine(
        store=store,
        connectors=connectors,
        client=http_client,
        settings=test_settings,
    )


@pytest.fixture
def client(engine):
    """Create a test client for the FastAPI application."""
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()
