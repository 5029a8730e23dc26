"""
Normalizer - Convert raw directory rows into scored catalog entries
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Union
from urllib.parse import urlparse

import structlog

from meta_adapter.core.config import settings
from .curated import BASE_URL_MAP, ENDPOINT_TEMPLATES
from .models import AuthMode, CatalogEntry, EndpointDef, HealthStatus, ParamSpec, RawApiEntry

logger = structlog.get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass
class QualityThresholds:
    """Admission bar applied after deduplication"""
    min_score: float = 0.4
    https_required: bool = True
    auth_none_preferred: bool = True
    auth_bar: float = 0.7

    @classmethod
    def from_settings(cls) -> "QualityThresholds":
        return cls(
            min_score=settings.QUALITY_MIN_SCORE,
            https_required=settings.QUALITY_HTTPS_REQUIRED,
            auth_none_preferred=settings.QUALITY_AUTH_NONE_PREFERRED,
            auth_bar=settings.QUALITY_AUTH_BAR,
        )


def normalize_auth(auth: Optional[str]) -> AuthMode:
    a = (auth or "").strip().lower()
    if a in ("", "no", "none"):
        return AuthMode.NONE
    if "oauth" in a:
        return AuthMode.OAUTH
    if "key" in a:
        return AuthMode.API_KEY
    return AuthMode.CUSTOM


def normalize_cors(cors: Optional[str]) -> Union[bool, str]:
    c = (cors or "").strip().lower()
    if c in ("yes", "true"):
        return True
    if c in ("no", "false"):
        return False
    return "unknown"


def calculate_quality_score(entry: RawApiEntry) -> float:
    score = 0.5

    if entry.https:
        score += 0.2
    if normalize_cors(entry.cors) is True:
        score += 0.1
    if normalize_auth(entry.auth) == AuthMode.NONE:
        score += 0.15
    if entry.description and len(entry.description) > 20:
        score += 0.05

    return round(min(1.0, max(0.0, score)), 2)


def extract_base_url(link: str, name: str) -> str:
    if name in BASE_URL_MAP:
        return BASE_URL_MAP[name]

    try:
        parsed = urlparse(link)
    except ValueError:
        # e.g. an unterminated IPv6 host; keep the link as published
        return link
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return link


def extract_path_params(path: str) -> Dict[str, ParamSpec]:
    """Every placeholder in a path template is a required string parameter"""
    return {
        name: ParamSpec(type="string", required=True, description=f"Value substituted for {{{name}}}")
        for name in PLACEHOLDER_PATTERN.findall(path)
    }


def generate_endpoints(name: str) -> List[EndpointDef]:
    templates = ENDPOINT_TEMPLATES.get(name)
    if templates:
        return [
            EndpointDef(
                name=t["name"],
                path=t["path"],
                method=t.get("method", "GET"),
                description=t.get("description", ""),
                params=extract_path_params(t["path"]),
            )
            for t in templates
        ]

    return [EndpointDef(
        name="default",
        path="/",
        method="GET",
        description=f"Call {name} API",
    )]


def normalize_raw_entry(entry: RawApiEntry, source: str) -> Optional[CatalogEntry]:
    """
    Normalize one raw directory row

    Args:
        entry: Raw entry with folded field names
        source: Identifier of the source the row came from

    Returns:
        CatalogEntry, or None when the row is incomplete or scores below 0.4
    """
    if not entry.api or not entry.link:
        return None

    quality_score = calculate_quality_score(entry)
    if quality_score < 0.4:
        logger.debug("Entry rejected on quality", api=entry.api, quality_score=quality_score)
        return None

    return CatalogEntry(
        name=entry.api,
        description=entry.description or f"{entry.api} API",
        auth=normalize_auth(entry.auth),
        https=entry.https,
        cors=normalize_cors(entry.cors),
        category=entry.category or "Other",
        base_url=extract_base_url(entry.link, entry.api),
        link=entry.link,
        endpoints=generate_endpoints(entry.api),
        source=source,
        quality_score=quality_score,
        last_checked=datetime.utcnow(),
        health_status=HealthStatus.UNKNOWN,
    )


def deduplicate_entries(entries: List[CatalogEntry]) -> List[CatalogEntry]:
    """Keep the highest-scoring entry per case-insensitive name"""
    seen: Dict[str, CatalogEntry] = {}

    for entry in entries:
        key = entry.name.lower()
        existing = seen.get(key)
        if existing is None or entry.quality_score > existing.quality_score:
            seen[key] = entry

    return list(seen.values())


def filter_by_quality(
    entries: List[CatalogEntry],
    thresholds: Optional[QualityThresholds] = None
) -> List[CatalogEntry]:
    thresholds = thresholds or QualityThresholds()
    kept = []

    for entry in entries:
        if entry.quality_score < thresholds.min_score:
            continue
        if thresholds.https_required and not entry.https:
            continue
        # Credentialed APIs must clear a stricter bar to be worth cataloging
        if thresholds.auth_none_preferred and entry.auth != AuthMode.NONE:
            if entry.quality_score < thresholds.auth_bar:
                continue
        kept.append(entry)

    return kept
