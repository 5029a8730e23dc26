"""
Source Connectors - Fetch raw API directory data from heterogeneous sources
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import httpx
import structlog

from meta_adapter.core.config import settings
from meta_adapter.core.exceptions import ErrorCode, SourceFetchException
from .curated import BUILTIN_PUBLIC_APIS
from .models import ApiSource, RawApiEntry, SourceKind, SourceStatus

logger = structlog.get_logger(__name__)

BUILTIN_SOURCE_URL = "builtin://curated"

_TRUTHY = {"yes", "true", "1"}
_FALSY = {"no", "false", "0"}


def _first(entry: Dict[str, Any], keys: Iterable[str], default: Any) -> Any:
    """Return the first present, non-empty value among alternative field names"""
    for key in keys:
        value = entry.get(key)
        if value is not None and value != "":
            return value
    return default


def _as_bool(value: Any, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    return default


def fold_entry(entry: Dict[str, Any]) -> RawApiEntry:
    """Fold the field casings used by different directories into one shape"""
    return RawApiEntry(
        api=str(_first(entry, ("API", "api", "name", "Name"), "")),
        description=str(_first(entry, ("Description", "description"), "")),
        auth=str(_first(entry, ("Auth", "auth"), "")),
        https=_as_bool(_first(entry, ("HTTPS", "https", "Https"), True)),
        cors=str(_first(entry, ("Cors", "cors", "CORS"), "unknown")),
        category=str(_first(entry, ("Category", "category"), "Other")),
        link=str(_first(entry, ("Link", "link", "url", "URL"), "")),
    )


def parse_entries(payload: Any) -> List[RawApiEntry]:
    """
    Parse a directory payload

    Accepts either a bare list of rows or an object carrying an ``entries``
    list. Anything else is treated as malformed.
    """
    if isinstance(payload, dict) and isinstance(payload.get("entries"), list):
        rows = payload["entries"]
    elif isinstance(payload, list):
        rows = payload
    else:
        raise SourceFetchException(
            "Unrecognized directory payload",
            error_code=ErrorCode.MALFORMED_PAYLOAD,
            details={"type": type(payload).__name__}
        )

    return [fold_entry(row) for row in rows if isinstance(row, dict)]


def get_builtin_public_apis() -> List[RawApiEntry]:
    """The curated built-in directory, used directly and as the fetch fallback"""
    return [fold_entry(row) for row in BUILTIN_PUBLIC_APIS]


def get_default_sources() -> List[ApiSource]:
    return [
        ApiSource(
            id="github-public-apis",
            name="GitHub Public APIs",
            url=settings.PUBLIC_APIS_URL,
            kind=SourceKind.REMOTE_JSON,
            format="json",
            fetch_interval=settings.SOURCE_FETCH_INTERVAL,
        ),
        ApiSource(
            id="builtin-curated",
            name="Built-in Curated APIs",
            url=BUILTIN_SOURCE_URL,
            kind=SourceKind.BUILTIN,
            format="json",
            fetch_interval=0,
        ),
    ]


class SourceConnector(ABC):
    """Base class for directory connectors, one per source kind"""

    kind: SourceKind

    @abstractmethod
    async def fetch_raw(self, source: ApiSource, strict: bool = False) -> List[RawApiEntry]:
        """
        Fetch and parse the raw entries of a source

        Args:
            source: Source descriptor
            strict: Surface fetch errors instead of falling back

        Returns:
            List of raw directory entries
        """
        pass

    async def close(self):
        pass


class BuiltinSourceConnector(SourceConnector):
    """Serves the curated list, never touches the network"""

    kind = SourceKind.BUILTIN

    async def fetch_raw(self, source: ApiSource, strict: bool = False) -> List[RawApiEntry]:
        entries = get_builtin_public_apis()
        logger.debug("Built-in entries loaded", source_id=source.id, count=len(entries))
        return entries


class RemoteJsonSourceConnector(SourceConnector):
    """Fetches a JSON directory over HTTP"""

    kind = SourceKind.REMOTE_JSON

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.timeout = timeout or settings.SOURCE_FETCH_TIMEOUT
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.timeout,
            limits=httpx.Limits(max_connections=settings.MAX_CONCURRENT_REQUESTS)
        )

    async def fetch_raw(self, source: ApiSource, strict: bool = False) -> List[RawApiEntry]:
        try:
            entries = await self._fetch(source)
            logger.info("Directory fetched", source_id=source.id, count=len(entries))
            return entries
        except SourceFetchException as e:
            if strict:
                raise
            logger.warning("Directory fetch failed, using built-in list",
                           source_id=source.id,
                           error=e.message)
            return get_builtin_public_apis()

    async def _fetch(self, source: ApiSource) -> List[RawApiEntry]:
        headers = {
            "User-Agent": settings.USER_AGENT,
            "Accept": "application/json",
        }
        try:
            response = await self.client.get(source.url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceFetchException(
                f"{source.name} returned {e.response.status_code}",
                error_code=ErrorCode.SOURCE_HTTP_ERROR,
                details={"source_id": source.id, "status_code": e.response.status_code}
            )
        except httpx.HTTPError as e:
            raise SourceFetchException(
                f"{source.name} unreachable: {e.__class__.__name__}: {e}",
                error_code=ErrorCode.SOURCE_UNREACHABLE,
                details={"source_id": source.id}
            )
        except ValueError as e:
            raise SourceFetchException(
                f"{source.name} returned invalid JSON: {e}",
                error_code=ErrorCode.MALFORMED_PAYLOAD,
                details={"source_id": source.id}
            )

        return parse_entries(payload)

    async def close(self):
        if self._owns_client:
            await self.client.aclose()


class ConnectorRegistry:
    """Resolves a source descriptor to the connector for its kind"""

    def __init__(self, connectors: Optional[List[SourceConnector]] = None):
        connectors = connectors or [BuiltinSourceConnector(), RemoteJsonSourceConnector()]
        self.connectors: Dict[SourceKind, SourceConnector] = {c.kind: c for c in connectors}

    def get(self, kind: SourceKind) -> SourceConnector:
        connector = self.connectors.get(kind)
        if connector is None:
            raise SourceFetchException(
                f"No connector registered for source kind {kind.value}",
                error_code=ErrorCode.UNSUPPORTED_SOURCE
            )
        return connector

    async def fetch_raw(self, source: ApiSource, strict: bool = False) -> List[RawApiEntry]:
        if source.status == SourceStatus.DISABLED:
            return []
        entries = await self.get(source.kind).fetch_raw(source, strict=strict)
        source.last_fetch = datetime.utcnow()
        return entries

    async def close(self):
        for connector in self.connectors.values():
            await connector.close()
