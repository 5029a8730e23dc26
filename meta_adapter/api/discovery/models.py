"""
Catalog data model - entries, endpoint definitions, sources, flows and results
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the HTTP surface"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class AuthMode(str, Enum):
    """Authentication burden of an external API"""
    NONE = "none"
    API_KEY = "apiKey"
    OAUTH = "oauth"
    CUSTOM = "custom"


class HealthStatus(str, Enum):
    """Last observed health of an external API"""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


class SourceKind(str, Enum):
    """How a directory source is fetched and parsed"""
    REMOTE_JSON = "remote-json"
    BUILTIN = "builtin"


class SourceStatus(str, Enum):
    ACTIVE = "active"
    ERROR = "error"
    DISABLED = "disabled"


class FlowProvenance(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class RawApiEntry(BaseModel):
    """One directory row after field-casing has been folded"""
    api: str = ""
    description: str = ""
    auth: str = ""
    https: bool = True
    cors: str = "unknown"
    category: str = "Other"
    link: str = ""


class ParamSpec(CamelModel):
    type: str = "string"
    required: bool = False
    description: Optional[str] = None


class EndpointDef(CamelModel):
    """A callable operation declared by a catalog entry"""
    name: str
    path: str
    method: str = "GET"
    description: str = ""
    params: Dict[str, ParamSpec] = Field(default_factory=dict)
    sample_response: Optional[Any] = None


class CatalogEntry(CamelModel):
    """Normalized description of one external API"""
    name: str
    description: str
    auth: AuthMode
    https: bool
    cors: Union[bool, Literal["unknown"]] = "unknown"
    category: str = "Other"
    base_url: str
    link: Optional[str] = None
    endpoints: List[EndpointDef] = Field(default_factory=list)
    source: str
    quality_score: float = Field(ge=0.0, le=1.0)
    last_checked: datetime = Field(default_factory=datetime.utcnow)
    health_status: HealthStatus = HealthStatus.UNKNOWN


class ApiSource(CamelModel):
    """Serializable descriptor of a directory source"""
    id: str
    name: str
    url: str
    kind: SourceKind
    format: str = "json"
    fetch_interval: int = 0  # seconds, 0 = never refetch
    last_fetch: Optional[datetime] = None
    status: SourceStatus = SourceStatus.ACTIVE
    error: Optional[str] = None


class AutoFlowStep(CamelModel):
    id: str
    endpoint_key: str
    description: str = ""
    optional: bool = False
    params: Dict[str, Any] = Field(default_factory=dict)


class AutoFlow(CamelModel):
    """A named, ordered composition of auto endpoints"""
    id: str
    name: str
    description: str
    steps: List[AutoFlowStep]
    categories: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    source: FlowProvenance = FlowProvenance.AUTO


class AutoRegisteredEndpoint(CamelModel):
    """Callable unit derived from a catalog entry and one of its endpoint defs"""
    key: str
    api_name: str
    app: str = "public.api"
    fn: str
    description: str
    scopes: List[str] = Field(default_factory=lambda: ["public"])
    args: Dict[str, ParamSpec] = Field(default_factory=dict)
    base_url: str
    path: str
    method: str
    auth: AuthMode
    category: str
    sample_phrases: List[str] = Field(default_factory=list)
    status: Literal["live", "stub"] = "live"

    @property
    def required_args(self) -> List[str]:
        return [name for name, spec in self.args.items() if spec.required]


class IngestResult(CamelModel):
    """Outcome of ingesting one source"""
    source_id: str
    success: bool
    apis_found: int = 0
    apis_added: int = 0
    apis_updated: int = 0
    apis_skipped: int = 0
    errors: List[str] = Field(default_factory=list)
    duration_ms: int = 0
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class IngestSummary(CamelModel):
    """Aggregate of a quick or remote ingest across its sources"""
    success: bool
    apis_ingested: int = 0
    new_apis: int = 0
    total_apis: int = 0
    duration_ms: int = 0
    errors: List[str] = Field(default_factory=list)
    results: List[IngestResult] = Field(default_factory=list)


class CatalogStats(CamelModel):
    total_apis: int = 0
    total_endpoints: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)
    by_auth: Dict[str, int] = Field(default_factory=dict)
    by_source: Dict[str, int] = Field(default_factory=dict)
    healthy_apis: int = 0
    no_auth_apis: int = 0
    average_quality_score: float = 0.0
    total_flows: int = 0
    total_sources: int = 0
    last_full_ingest: Optional[datetime] = None
