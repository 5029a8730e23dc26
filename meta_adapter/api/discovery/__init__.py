"""
API Discovery Package

This package contains the components that discover public APIs, normalize and
score them into the catalog, derive callable endpoints and compose flows.
"""

from .catalog_store import CatalogStore, normalize_id
from .source_connectors import ConnectorRegistry, get_default_sources
from .ingestion import IngestionOrchestrator
from .registry_sync import RegistrySynchronizer
from .capability_registry import CapabilityRegistry, InMemoryCapabilityRegistry
from .flow_composer import FlowComposer
from .health_monitor import CatalogHealthMonitor

__all__ = [
    "CatalogStore",
    "normalize_id",
    "ConnectorRegistry",
    "get_default_sources",
    "IngestionOrchestrator",
    "RegistrySynchronizer",
    "CapabilityRegistry",
    "InMemoryCapabilityRegistry",
    "FlowComposer",
    "CatalogHealthMonitor",
]
