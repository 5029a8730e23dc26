import asyncio

import pytest

from meta_adapter.core.config import settings
from meta_adapter.core.exceptions import ErrorCode, SourceFetchException
from meta_adapter.api.discovery.ingestion import INGESTION_BUSY_MESSAGE, IngestionOrchestrator
from meta_adapter.api.discovery.models import SourceKind, SourceStatus
from meta_adapter.api.discovery.source_connectors import (
    BuiltinSourceConnector,
    ConnectorRegistry,
    SourceConnector,
)


class FailingConnector(SourceConnector):
    kind = SourceKind.REMOTE_JSON

    async def fetch_raw(self, source, strict=False):
        raise SourceFetchException("directory down", error_code=ErrorCode.SOURCE_UNREACHABLE)


@pytest.fixture
def orchestrator(store, connectors):
    return IngestionOrchestrator(store, connectors=connectors)


@pytest.mark.asyncio
async def test_quick_ingest_loads_builtin_catalog(orchestrator, store, upstream):
    result = await orchestrator.quick_ingest()

    assert result.success is True
    assert result.total_apis > 0
    assert result.apis_ingested == result.total_apis
    assert result.new_apis == result.total_apis
    assert result.errors == []
    assert store.get_api("Dog CEO").quality_score == 1.0
    assert store.get_api("Dog CEO").source == "builtin-curated"
    assert upstream.requests == []
    assert not orchestrator.in_progress


@pytest.mark.asyncio
async def test_reingesting_adds_nothing_new(orchestrator):
    source = orchestrator.store.get_source("builtin-curated")

    first = await orchestrator.ingest_from_source(source)
    second = await orchestrator.ingest_from_source(source)

    assert first.apis_added > 0
    assert second.apis_added == 0
    assert second.apis_updated <= first.apis_added


@pytest.mark.asyncio
async def test_admitted_entries_clear_quality_bar(orchestrator, store):
    await orchestrator.quick_ingest()

    for api in store.get_all_apis():
        assert api.quality_score >= 0.4
        assert api.https


@pytest.mark.asyncio
async def test_ingest_all_isolates_failing_source(store):
    orchestrator = IngestionOrchestrator(
        store,
        connectors=ConnectorRegistry([BuiltinSourceConnector(), FailingConnector()]),
    )

    results = {r.source_id: r for r in await orchestrator.ingest_all()}

    assert results["builtin-curated"].success
    assert not results["github-public-apis"].success
    assert results["github-public-apis"].errors == ["directory down"]
    assert store.get_source("github-public-apis").status == SourceStatus.ERROR
    assert store.get_source("builtin-curated").status == SourceStatus.ACTIVE
    assert store.last_full_ingest is not None
    assert len(store.get_all_apis()) > 0


@pytest.mark.asyncio
async def test_concurrent_ingestion_is_rejected(orchestrator, upstream):
    upstream.add(settings.PUBLIC_APIS_URL, json={"entries": []}, delay=0.2)

    async def late_quick_ingest():
        await asyncio.sleep(0.05)
        return await orchestrator.quick_ingest()

    full, quick = await asyncio.gather(orchestrator.ingest_all(), late_quick_ingest())

    assert all(r.success for r in full)
    assert quick.success is False
    assert quick.errors == [INGESTION_BUSY_MESSAGE]
    assert not orchestrator.in_progress


@pytest.mark.asyncio
async def test_busy_flag_released_after_error(orchestrator, monkeypatch):
    def boom(when=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(orchestrator.store, "set_last_full_ingest", boom)

    with pytest.raises(RuntimeError):
        await orchestrator.ingest_all()

    assert not orchestrator.in_progress
    assert (await orchestrator.quick_ingest()).success is True


@pytest.mark.asyncio
async def test_ingest_from_remote_reports_new_apis(orchestrator, upstream):
    await orchestrator.quick_ingest()
    upstream.add(settings.PUBLIC_APIS_URL, json={"entries": [
        {"API": "Widget Facts", "Description": "Facts about widgets, daily", "Auth": "",
         "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://widgets.example.com/docs"},
        {"API": "Dog CEO", "Description": "Random pictures of dogs", "Auth": "",
         "HTTPS": True, "Cors": "yes", "Category": "Animals", "Link": "https://dog.ceo/dog-api/"},
    ]})

    result = await orchestrator.ingest_from_remote()

    assert result.success is True
    assert result.new_apis == 1
    assert orchestrator.store.get_api("Widget Facts").base_url == "https://widgets.example.com"


@pytest.mark.asyncio
async def test_ingest_from_remote_surfaces_fetch_errors(orchestrator, upstream):
    upstream.add(settings.PUBLIC_APIS_URL, status_code=503)

    result = await orchestrator.ingest_from_remote()

    assert result.success is False
    assert result.new_apis == 0
    assert result.errors
    assert orchestrator.store.get_source("github-public-apis").status == SourceStatus.ERROR


@pytest.mark.asyncio
async def test_malformed_link_does_not_sink_source(orchestrator, upstream):
    upstream.add(settings.PUBLIC_APIS_URL, json={"entries": [
        {"API": "Good One", "Description": "A perfectly ordinary public API", "Auth": "",
         "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://good.example.com/docs"},
        {"API": "Bad Host", "Description": "Link with an unterminated IPv6 host", "Auth": "",
         "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "http://[broken"},
    ]})
    source = orchestrator.store.get_source("github-public-apis")

    result = await orchestrator.ingest_from_source(source, strict=True)

    assert result.success
    assert result.errors == []
    assert result.apis_found == 2
    assert orchestrator.store.get_api("Good One").base_url == "https://good.example.com"
    assert orchestrator.store.get_api("Bad Host").base_url == "http://[broken"
    assert orchestrator.store.get_source("github-public-apis").status == SourceStatus.ACTIVE
