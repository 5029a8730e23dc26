import pytest

from meta_adapter.api.discovery.models import AuthMode, CatalogEntry, RawApiEntry
from meta_adapter.api.discovery.normalizer import (
    QualityThresholds,
    calculate_quality_score,
    deduplicate_entries,
    extract_base_url,
    filter_by_quality,
    generate_endpoints,
    normalize_auth,
    normalize_cors,
    normalize_raw_entry,
)


def make_entry(name="Example", score=0.9, auth=AuthMode.NONE, https=True):
    return CatalogEntry(
        name=name,
        description=f"{name} API",
        auth=auth,
        https=https,
        base_url="https://example.com",
        source="test",
        quality_score=score,
    )


@pytest.mark.parametrize("raw,expected", [
    ("", AuthMode.NONE),
    ("No", AuthMode.NONE),
    ("none", AuthMode.NONE),
    ("apiKey", AuthMode.API_KEY),
    ("X-Mashape-Key", AuthMode.API_KEY),
    ("OAuth", AuthMode.OAUTH),
    ("User-Agent", AuthMode.CUSTOM),
])
def test_normalize_auth(raw, expected):
    assert normalize_auth(raw) == expected


def test_normalize_cors():
    assert normalize_cors("yes") is True
    assert normalize_cors("TRUE") is True
    assert normalize_cors("no") is False
    assert normalize_cors("unknown") == "unknown"
    assert normalize_cors("") == "unknown"


def test_dog_ceo_short_description_scores_095():
    raw = RawApiEntry(
        api="Dog CEO",
        description="Dog pictures",
        auth="",
        https=True,
        cors="yes",
        category="Animals",
        link="https://dog.ceo/dog-api/",
    )

    entry = normalize_raw_entry(raw, "builtin-curated")

    assert entry is not None
    assert entry.quality_score == 0.95
    assert entry.auth == AuthMode.NONE
    assert entry.base_url == "https://dog.ceo"
    assert [e.name for e in entry.endpoints] == ["random", "breed"]


def test_description_bonus_and_clamp():
    raw = RawApiEntry(api="Dog CEO", description="Random pictures of dogs from the archive",
                      auth="", https=True, cors="yes", link="https://dog.ceo/dog-api/")
    assert calculate_quality_score(raw) == 1.0


def test_minimal_entry_scores_base():
    raw = RawApiEntry(api="Closed", description="short", auth="apiKey", https=False,
                      cors="no", link="http://closed.example.com")
    assert calculate_quality_score(raw) == 0.5


def test_incomplete_entries_rejected():
    assert normalize_raw_entry(RawApiEntry(api="", link="https://x.io"), "test") is None
    assert normalize_raw_entry(RawApiEntry(api="No Link", link=""), "test") is None


def test_extract_base_url():
    assert extract_base_url("https://open-meteo.com/", "Open-Meteo") == "https://api.open-meteo.com"
    assert extract_base_url("https://example.com/docs/api?x=1", "Example") == "https://example.com"
    assert extract_base_url("not a url", "Broken") == "not a url"


def test_malformed_link_kept_verbatim():
    assert extract_base_url("http://[broken", "Broken") == "http://[broken"

    raw = RawApiEntry(api="Broken Host", description="Link with an unterminated IPv6 host",
                      auth="", https=True, cors="yes", link="http://[broken")
    entry = normalize_raw_entry(raw, "test")

    assert entry is not None
    assert entry.base_url == "http://[broken"
    assert entry.link == "http://[broken"


def test_placeholders_become_required_params():
    endpoints = {e.name: e for e in generate_endpoints("Nager.Date")}

    holidays = endpoints["holidays"]
    assert set(holidays.params) == {"year", "country"}
    assert all(p.required and p.type == "string" for p in holidays.params.values())


def test_unknown_api_gets_default_endpoint():
    endpoints = generate_endpoints("Something Obscure")

    assert len(endpoints) == 1
    assert endpoints[0].name == "default"
    assert endpoints[0].path == "/"
    assert endpoints[0].method == "GET"
    assert endpoints[0].params == {}


def test_deduplicate_keeps_highest_score_and_is_idempotent():
    entries = [
        make_entry("Cat Facts", 0.7),
        make_entry("cat facts", 0.95),
        make_entry("Dog CEO", 0.9),
    ]

    once = deduplicate_entries(entries)
    twice = deduplicate_entries(once)

    assert len(once) == 2
    assert {(e.name.lower(), e.quality_score) for e in once} == {("cat facts", 0.95), ("dog ceo", 0.9)}
    assert [e.name for e in twice] == [e.name for e in once]


def test_filter_by_quality():
    entries = [
        make_entry("Good", 0.95),
        make_entry("Floor", 0.3),
        make_entry("Plain HTTP", 0.8, https=False),
        make_entry("Keyed Strong", 0.85, auth=AuthMode.API_KEY),
        make_entry("Keyed Weak", 0.6, auth=AuthMode.API_KEY),
    ]

    kept = {e.name for e in filter_by_quality(entries, QualityThresholds())}
    assert kept == {"Good", "Keyed Strong"}

    relaxed = QualityThresholds(https_required=False, auth_none_preferred=False)
    kept = {e.name for e in filter_by_quality(entries, relaxed)}
    assert kept == {"Good", "Plain HTTP", "Keyed Strong", "Keyed Weak"}


def test_filtered_entries_respect_floor():
    entries = [make_entry(f"API {i}", score) for i, score in enumerate([0.1, 0.39, 0.4, 0.75])]
    assert all(e.quality_score >= 0.4 for e in filter_by_quality(entries))
