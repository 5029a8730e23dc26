"""
Catalog Store - In-memory registry of catalog entries, flows and sources
"""

import re
from datetime import datetime
from typing import Dict, List, Optional

import structlog

from .models import (
    ApiSource,
    AuthMode,
    AutoFlow,
    CatalogEntry,
    CatalogStats,
    HealthStatus,
)

logger = structlog.get_logger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_id(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '_', trim underscores"""
    return _NON_ALNUM.sub("_", name.lower()).strip("_")


class CatalogStore:
    """
    Authoritative owner of the entry, flow and source maps.

    Every mutation is a single dict assignment or deletion, so readers never
    observe a half-written entry.
    """

    def __init__(self):
        self._apis: Dict[str, CatalogEntry] = {}
        self._flows: Dict[str, AutoFlow] = {}
        self._sources: Dict[str, ApiSource] = {}
        self.last_full_ingest: Optional[datetime] = None

    # Entries

    def store_api(self, entry: CatalogEntry) -> bool:
        """
        Store an entry unless a fresher one already exists under its id

        Returns:
            True if the entry was written
        """
        api_id = normalize_id(entry.name)
        existing = self._apis.get(api_id)

        if existing is not None and entry.last_checked <= existing.last_checked:
            return False

        self._apis[api_id] = entry
        return True

    def has_api(self, name: str) -> bool:
        return normalize_id(name) in self._apis

    def get_api(self, name: str) -> Optional[CatalogEntry]:
        return self._apis.get(normalize_id(name))

    def get_all_apis(self) -> List[CatalogEntry]:
        return list(self._apis.values())

    def get_apis_by_category(self, category: str) -> List[CatalogEntry]:
        wanted = category.lower()
        return [a for a in self._apis.values() if a.category.lower() == wanted]

    def get_apis_by_source(self, source_id: str) -> List[CatalogEntry]:
        return [a for a in self._apis.values() if a.source == source_id]

    def get_healthy_apis(self) -> List[CatalogEntry]:
        return [a for a in self._apis.values() if a.health_status == HealthStatus.HEALTHY]

    def get_no_auth_apis(self) -> List[CatalogEntry]:
        return [a for a in self._apis.values() if a.auth == AuthMode.NONE]

    def search_apis(self, query: str) -> List[CatalogEntry]:
        q = query.lower()
        return [
            a for a in self._apis.values()
            if q in a.name.lower() or q in a.description.lower() or q in a.category.lower()
        ]

    def update_health(self, name: str, status: HealthStatus) -> Optional[CatalogEntry]:
        """Record a health observation as a fresher copy of the entry"""
        existing = self.get_api(name)
        if existing is None:
            return None

        updated = existing.model_copy(update={
            "health_status": status,
            "last_checked": max(datetime.utcnow(), existing.last_checked),
        })
        # Same-instant observations still need to land
        self._apis[normalize_id(name)] = updated
        return updated

    def remove_api(self, name: str) -> bool:
        api_id = normalize_id(name)
        if api_id in self._apis:
            del self._apis[api_id]
            logger.info("API removed from catalog", api_id=api_id)
            return True
        return False

    def clear_catalog(self):
        self._apis.clear()
        self._flows.clear()
        self.last_full_ingest = None
        logger.info("Catalog cleared")

    # Flows

    def store_flow(self, flow: AutoFlow):
        self._flows[flow.id] = flow

    def get_flow(self, flow_id: str) -> Optional[AutoFlow]:
        return self._flows.get(flow_id)

    def get_all_flows(self) -> List[AutoFlow]:
        return list(self._flows.values())

    def remove_flow(self, flow_id: str) -> bool:
        return self._flows.pop(flow_id, None) is not None

    # Sources

    def store_source(self, source: ApiSource):
        self._sources[source.id] = source

    def get_source(self, source_id: str) -> Optional[ApiSource]:
        return self._sources.get(source_id)

    def get_all_sources(self) -> List[ApiSource]:
        return list(self._sources.values())

    # Stats

    def set_last_full_ingest(self, when: Optional[datetime] = None):
        self.last_full_ingest = when or datetime.utcnow()

    def get_stats(self) -> CatalogStats:
        apis = list(self._apis.values())
        by_category: Dict[str, int] = {}
        by_auth: Dict[str, int] = {}
        by_source: Dict[str, int] = {}

        for api in apis:
            by_category[api.category] = by_category.get(api.category, 0) + 1
            by_auth[api.auth.value] = by_auth.get(api.auth.value, 0) + 1
            by_source[api.source] = by_source.get(api.source, 0) + 1

        total_quality = sum(api.quality_score for api in apis)

        return CatalogStats(
            total_apis=len(apis),
            total_endpoints=sum(len(api.endpoints) for api in apis),
            by_category=by_category,
            by_auth=by_auth,
            by_source=by_source,
            healthy_apis=sum(1 for api in apis if api.health_status == HealthStatus.HEALTHY),
            no_auth_apis=sum(1 for api in apis if api.auth == AuthMode.NONE),
            average_quality_score=round(total_quality / len(apis), 3) if apis else 0.0,
            total_flows=len(self._flows),
            total_sources=len(self._sources),
            last_full_ingest=self.last_full_ingest,
        )
