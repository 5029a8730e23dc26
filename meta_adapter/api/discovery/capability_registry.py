"""
Capability registry boundary - where derived endpoints are handed to the host
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
from urllib.parse import urlparse

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)

ALLOWED_METHODS = {"GET", "POST", "PUT", "DELETE", "PATCH"}
REQUIRED_MANIFEST_FIELDS = ("devkit.key", "name", "method", "url")


class RegistrationError(BaseModel):
    field: str
    message: str


class RegistrationResult(BaseModel):
    valid: bool
    errors: List[RegistrationError] = Field(default_factory=list)


class CapabilityRegistry(ABC):
    """External registry accepting endpoint manifests"""

    @abstractmethod
    async def register_endpoint(self, manifest: Dict[str, Any]) -> RegistrationResult:
        pass

    @abstractmethod
    def list_endpoints(self) -> List[Dict[str, Any]]:
        pass


def validate_manifest(manifest: Dict[str, Any]) -> List[RegistrationError]:
    errors = []

    for field in REQUIRED_MANIFEST_FIELDS:
        if not manifest.get(field):
            errors.append(RegistrationError(field=field, message=f"{field} is required"))

    method = manifest.get("method")
    if method and method not in ALLOWED_METHODS:
        errors.append(RegistrationError(field="method", message=f"Unsupported method {method}"))

    url = manifest.get("url")
    if url:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(RegistrationError(field="url", message=f"Invalid URL {url}"))

    return errors


class InMemoryCapabilityRegistry(CapabilityRegistry):
    """Process-local registry, keyed by devkit key"""

    def __init__(self):
        self._endpoints: Dict[str, Dict[str, Any]] = {}

    async def register_endpoint(self, manifest: Dict[str, Any]) -> RegistrationResult:
        errors = validate_manifest(manifest)
        if errors:
            return RegistrationResult(valid=False, errors=errors)

        self._endpoints[manifest["devkit.key"]] = manifest
        return RegistrationResult(valid=True)

    def list_endpoints(self) -> List[Dict[str, Any]]:
        return list(self._endpoints.values())
