"""
Registry Synchronizer - Derive callable endpoints from the catalog and publish
them to the capability registry
"""

import re
from typing import Any, Dict, List, Optional

import structlog

from meta_adapter.core.exceptions import ErrorCode, RegistrationException
from .capability_registry import CapabilityRegistry, InMemoryCapabilityRegistry
from .catalog_store import CatalogStore, normalize_id
from .display_fields import DisplayFieldMapping
from .models import AuthMode, AutoRegisteredEndpoint, CatalogEntry, EndpointDef

logger = structlog.get_logger(__name__)

MAX_SAMPLE_PHRASES = 5
MANIFEST_SOURCE = "meta-adapter"

_NON_LETTERS = re.compile(r"[^a-z]")


def generate_endpoint_key(api_name: str, endpoint_name: str) -> str:
    return f"public.{normalize_id(api_name)}.{normalize_id(endpoint_name)}"


def generate_sample_phrases(api: CatalogEntry, endpoint: EndpointDef) -> List[str]:
    """Category phrase templates followed by the generic ones, capped at five"""
    name = api.name.lower()
    letters = _NON_LETTERS.sub("", name)
    category = api.category.lower()

    if category == "weather":
        phrases = ["what's the weather", "check weather", "get weather forecast"]
    elif category in ("entertainment", "jokes"):
        phrases = ["tell me a joke", "random joke", "make me laugh"]
    elif category in ("cryptocurrency", "crypto"):
        phrases = ["bitcoin price", "crypto prices", f"check {name}"]
    elif category == "animals":
        phrases = [f"show me a {letters}", f"random {name}"]
    elif category == "food & drink":
        phrases = ["random recipe", f"get a {letters} recipe"]
    elif category == "games":
        phrases = [f"play {name}", f"{name} trivia"]
    elif category == "science":
        phrases = [f"{name} fact", f"science from {name}"]
    elif category in ("calendar", "holidays"):
        phrases = ["next holiday", "public holidays", "when is next holiday"]
    else:
        phrases = []

    phrases += [f"call {name}", f"use {name} api", f"{endpoint.name} from {name}"]
    return phrases[:MAX_SAMPLE_PHRASES]


def api_to_endpoints(api: CatalogEntry) -> List[AutoRegisteredEndpoint]:
    return [
        AutoRegisteredEndpoint(
            key=generate_endpoint_key(api.name, ep.name),
            api_name=api.name,
            fn=ep.name,
            description=ep.description or f"{api.name} {ep.name}",
            args={name: spec.model_copy() for name, spec in ep.params.items()},
            base_url=api.base_url,
            path=ep.path,
            method=ep.method,
            auth=api.auth,
            category=api.category,
            sample_phrases=generate_sample_phrases(api, ep),
        )
        for ep in api.endpoints
    ]


class RegistrySynchronizer:
    """
    Read-side view of the catalog as callable endpoints.

    Endpoints are derived on every read, so they always reflect the current
    catalog contents.
    """

    def __init__(
        self,
        store: CatalogStore,
        registry: Optional[CapabilityRegistry] = None,
        display_fields: Optional[DisplayFieldMapping] = None
    ):
        self.store = store
        self.registry = registry or InMemoryCapabilityRegistry()
        self.display_fields = display_fields or DisplayFieldMapping()

    def all_auto_endpoints(self) -> List[AutoRegisteredEndpoint]:
        return [ep for api in self.store.get_all_apis() for ep in api_to_endpoints(api)]

    def get_endpoint(self, key: str) -> Optional[AutoRegisteredEndpoint]:
        for endpoint in self.all_auto_endpoints():
            if endpoint.key == key:
                return endpoint
        return None

    def search(self, query: str) -> List[AutoRegisteredEndpoint]:
        q = query.lower()
        return [
            ep for ep in self.all_auto_endpoints()
            if q in ep.key.lower()
            or q in ep.api_name.lower()
            or q in ep.description.lower()
            or q in ep.category.lower()
            or any(q in phrase.lower() for phrase in ep.sample_phrases)
        ]

    def by_category(self, category: str) -> List[AutoRegisteredEndpoint]:
        return [ep for api in self.store.get_apis_by_category(category) for ep in api_to_endpoints(api)]

    def no_auth_endpoints(self) -> List[AutoRegisteredEndpoint]:
        return [ep for api in self.store.get_no_auth_apis() for ep in api_to_endpoints(api)]

    def describe_endpoint(self, key: str) -> Optional[str]:
        """Markdown summary of an endpoint, or None when the key is unknown"""
        endpoint = self.get_endpoint(key)
        if endpoint is None:
            return None

        auth = "No authentication required" if endpoint.auth == AuthMode.NONE else endpoint.auth.value
        examples = ", ".join(f'"{p}"' for p in endpoint.sample_phrases[:3])

        return "\n".join([
            f"**{endpoint.api_name}** - {endpoint.fn}",
            endpoint.description,
            "",
            f"- **Endpoint:** `{endpoint.method} {endpoint.base_url}{endpoint.path}`",
            f"- **Auth:** {auth}",
            f"- **Category:** {endpoint.category}",
            f"- **Example phrases:** {examples}",
        ])

    def get_stats(self) -> Dict[str, Any]:
        endpoints = self.all_auto_endpoints()
        by_category: Dict[str, int] = {}
        by_auth: Dict[str, int] = {}

        for ep in endpoints:
            by_category[ep.category] = by_category.get(ep.category, 0) + 1
            by_auth[ep.auth.value] = by_auth.get(ep.auth.value, 0) + 1

        return {
            "totalEndpoints": len(endpoints),
            "totalApis": len(self.store.get_all_apis()),
            "byCategory": by_category,
            "byAuth": by_auth,
            "liveEndpoints": sum(1 for ep in endpoints if ep.status == "live"),
        }

    # DevKit manifests

    def devkit_manifest(self, api: CatalogEntry) -> Dict[str, Any]:
        return {
            "name": api.name,
            "description": api.description,
            "auth": api.auth.value,
            "category": api.category,
            "baseUrl": api.base_url,
            "endpoints": [
                {
                    "key": generate_endpoint_key(api.name, ep.name),
                    "path": ep.path,
                    "method": ep.method,
                    "description": ep.description,
                }
                for ep in api.endpoints
            ],
            "source": api.source,
            "qualityScore": api.quality_score,
        }

    def all_devkit_manifests(self) -> List[Dict[str, Any]]:
        return [self.devkit_manifest(api) for api in self.store.get_all_apis()]

    # Capability registry

    def build_manifest(self, endpoint: AutoRegisteredEndpoint) -> Dict[str, Any]:
        display = self.display_fields.build_display(
            endpoint.category,
            title=endpoint.api_name,
            subtitle=endpoint.description,
        )

        return {
            "devkit.key": endpoint.key,
            "name": endpoint.api_name,
            "method": endpoint.method,
            "url": f"{endpoint.base_url}{endpoint.path}",
            "params": {
                name: spec.model_dump(exclude_none=True)
                for name, spec in endpoint.args.items()
            },
            "security.visibility": "public",
            "canvas.display": display.model_dump(exclude_none=True),
            "telemetry.tags": [endpoint.category, endpoint.api_name, "public-api"],
            "semantics.phrases": list(endpoint.sample_phrases),
            "source": MANIFEST_SOURCE,
        }

    async def sync_all_to_canvas_registry(self) -> Dict[str, Any]:
        """
        Register every derived endpoint with the capability registry

        Returns:
            Dict with synced count, total endpoints and per-endpoint errors
        """
        endpoints = self.all_auto_endpoints()
        errors: List[str] = []
        synced = 0

        for endpoint in endpoints:
            try:
                result = await self.registry.register_endpoint(self.build_manifest(endpoint))
                if not result.valid:
                    raise RegistrationException(
                        ", ".join(e.message for e in result.errors),
                        error_code=ErrorCode.MANIFEST_REJECTED,
                        details={"key": endpoint.key}
                    )
                synced += 1
            except RegistrationException as e:
                errors.append(f"{endpoint.key}: {e.message}")
            except Exception as e:
                errors.append(f"{endpoint.key}: {e}")

        logger.info("Endpoints synced to capability registry",
                    synced=synced,
                    total=len(endpoints),
                    failed=len(errors))

        return {"synced": synced, "total": len(endpoints), "errors": errors}

    def get_sync_status(self) -> Dict[str, int]:
        endpoints = self.all_auto_endpoints()
        registered_keys = {m.get("devkit.key") for m in self.registry.list_endpoints()}
        registered = sum(1 for ep in endpoints if ep.key in registered_keys)

        return {
            "total": len(endpoints),
            "registered": registered,
            "pending": len(endpoints) - registered,
        }
