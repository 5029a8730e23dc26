import pytest

from meta_adapter.api.discovery.flow_composer import FLOW_TEMPLATES, FlowComposer
from meta_adapter.api.discovery.models import FlowProvenance
from meta_adapter.api.discovery.registry_sync import RegistrySynchronizer


@pytest.fixture
def composer(catalog):
    return FlowComposer(catalog)


def test_every_template_resolves_against_builtin_catalog(composer):
    flows = composer.generate_auto_flows()

    assert {f.id for f in flows} == {t.id for t in FLOW_TEMPLATES}
    assert all(f.source == FlowProvenance.AUTO for f in flows)


def test_flow_steps_reference_live_endpoints(composer, catalog):
    synchronizer = RegistrySynchronizer(catalog)

    for flow in composer.generate_auto_flows():
        for step in flow.steps:
            assert synchronizer.get_endpoint(step.endpoint_key) is not None, step.endpoint_key


def test_weather_and_joke_shape(composer):
    composer.generate_auto_flows()
    flow = composer.get_flow("weather-and-joke")

    assert [s.endpoint_key for s in flow.steps] == ["public.open_meteo.forecast", "public.jokeapi.random"]
    assert [s.id for s in flow.steps] == ["step-1", "step-2"]
    assert flow.steps[0].params == {"lat": 40.7128, "lon": -74.0060}
    assert flow.categories == ["Weather", "Entertainment"]


def test_optional_steps_follow_template(composer):
    composer.generate_auto_flows()

    geek = composer.get_flow("geek-pack")
    assert [s.optional for s in geek.steps] == [False, True, True]
    assert geek.steps[0].params == {"name": "pikachu"}


def test_unresolvable_template_is_dropped(composer, catalog):
    composer.generate_auto_flows()
    catalog.remove_api("JokeAPI")

    flows = composer.generate_auto_flows()

    assert "weather-and-joke" not in {f.id for f in flows}
    assert composer.get_flow("weather-and-joke") is None
    assert composer.get_flow("morning-brief") is not None


def test_generate_category_flow(composer):
    flow = composer.generate_category_flow(["Weather", "Animals"])

    assert flow.id == "custom-weather-animals"
    assert flow.name == "Weather + Animals Flow"
    assert [s.endpoint_key for s in flow.steps] == ["public.open_meteo.forecast", "public.dog_ceo.random"]
    assert composer.get_flow(flow.id) is flow


def test_category_flow_needs_two_steps(composer):
    assert composer.generate_category_flow(["Weather"]) is None
    assert composer.generate_category_flow(["Weather", "Underwater Basket Weaving"]) is None


def test_describe_flow(composer):
    composer.generate_auto_flows()
    description = composer.describe_flow("fun-facts")

    assert description.startswith("**Fun Facts Bundle**")
    assert "3. **public.quotable.random**" in description
    assert "(optional)" in description
    assert composer.describe_flow("missing") is None


def test_flow_stats(composer):
    composer.generate_auto_flows()
    stats = composer.get_flow_stats()

    assert stats["totalFlows"] == len(FLOW_TEMPLATES)
    assert stats["autoGenerated"] == len(FLOW_TEMPLATES)
    assert stats["manual"] == 0
    assert stats["templates"] == len(FLOW_TEMPLATES)
    assert stats["byCategory"]["Entertainment"] >= 4
    assert len(composer.available_templates()) == len(FLOW_TEMPLATES)
