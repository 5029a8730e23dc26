"""
Flow Composer - Build multi-step flows from templates over the live catalog
"""

import re
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, Field

from .catalog_store import CatalogStore
from .models import AuthMode, AutoFlow, AutoFlowStep, CatalogEntry, FlowProvenance
from .registry_sync import generate_endpoint_key

logger = structlog.get_logger(__name__)

_NON_LETTERS = re.compile(r"[^a-z]")


class FlowTemplateStep(BaseModel):
    api_name: str
    endpoint: str
    optional: bool = False
    params: Dict[str, Any] = Field(default_factory=dict)


class FlowTemplate(BaseModel):
    id: str
    name: str
    description: str
    categories: List[str]
    steps: List[FlowTemplateStep]


NYC = {"lat": 40.7128, "lon": -74.0060}

FLOW_TEMPLATES: List[FlowTemplate] = [
    FlowTemplate(
        id="weather-and-joke",
        name="Weather & Joke",
        description="Get current weather and a random joke to brighten your day",
        categories=["Weather", "Entertainment"],
        steps=[
            FlowTemplateStep(api_name="Open-Meteo", endpoint="forecast", params=NYC),
            FlowTemplateStep(api_name="JokeAPI", endpoint="random"),
        ],
    ),
    FlowTemplate(
        id="crypto-and-news",
        name="Crypto & Holiday",
        description="Check cryptocurrency prices and upcoming holidays",
        categories=["Cryptocurrency", "Calendar"],
        steps=[
            FlowTemplateStep(api_name="CoinGecko", endpoint="prices"),
            FlowTemplateStep(api_name="Nager.Date", endpoint="nextHoliday", params={"country": "US"}),
        ],
    ),
    FlowTemplate(
        id="fun-facts",
        name="Fun Facts Bundle",
        description="Get random dog picture, cat fact, and a quote",
        categories=["Animals", "Entertainment"],
        steps=[
            FlowTemplateStep(api_name="Dog CEO", endpoint="random"),
            FlowTemplateStep(api_name="Cat Facts", endpoint="fact"),
            FlowTemplateStep(api_name="Quotable", endpoint="random", optional=True),
        ],
    ),
    FlowTemplate(
        id="trivia-time",
        name="Trivia Time",
        description="Get trivia questions and random advice",
        categories=["Games", "Entertainment"],
        steps=[
            FlowTemplateStep(api_name="Trivia API", endpoint="questions"),
            FlowTemplateStep(api_name="Advice Slip", endpoint="random"),
        ],
    ),
    FlowTemplate(
        id="food-and-drink",
        name="Recipe Discovery",
        description="Get a random meal and cocktail recipe",
        categories=["Food & Drink"],
        steps=[
            FlowTemplateStep(api_name="TheMealDB", endpoint="random"),
            FlowTemplateStep(api_name="TheCocktailDB", endpoint="random"),
        ],
    ),
    FlowTemplate(
        id="geek-pack",
        name="Geek Pack",
        description="Pokemon, Star Wars, and Rick & Morty data",
        categories=["Games", "Entertainment"],
        steps=[
            FlowTemplateStep(api_name="PokeAPI", endpoint="pokemon", params={"name": "pikachu"}),
            FlowTemplateStep(api_name="Star Wars", endpoint="people", optional=True),
            FlowTemplateStep(api_name="Rick and Morty", endpoint="characters", optional=True),
        ],
    ),
    FlowTemplate(
        id="science-discovery",
        name="Science Discovery",
        description="NASA picture of the day and SpaceX launches",
        categories=["Science"],
        steps=[
            FlowTemplateStep(api_name="NASA", endpoint="apod"),
            FlowTemplateStep(api_name="SpaceX", endpoint="launches"),
        ],
    ),
    FlowTemplate(
        id="name-analyzer",
        name="Name Analyzer",
        description="Predict age, gender, and nationality from a name",
        categories=["Science"],
        steps=[
            FlowTemplateStep(api_name="Agify", endpoint="predict", params={"name": "michael"}),
            FlowTemplateStep(api_name="Genderize", endpoint="predict", params={"name": "michael"}),
            FlowTemplateStep(api_name="Nationalize", endpoint="predict", params={"name": "michael"}),
        ],
    ),
    FlowTemplate(
        id="morning-brief",
        name="Morning Brief",
        description="Weather, holidays, and an inspiring quote",
        categories=["Weather", "Calendar", "Entertainment"],
        steps=[
            FlowTemplateStep(api_name="Open-Meteo", endpoint="forecast", params=NYC),
            FlowTemplateStep(api_name="Nager.Date", endpoint="nextHoliday", params={"country": "US"}),
            FlowTemplateStep(api_name="Quotable", endpoint="random", optional=True),
        ],
    ),
    FlowTemplate(
        id="dev-test",
        name="Developer Test APIs",
        description="JSONPlaceholder and Random User for testing",
        categories=["Open Data"],
        steps=[
            FlowTemplateStep(api_name="JSONPlaceholder", endpoint="posts"),
            FlowTemplateStep(api_name="Random User", endpoint="user"),
        ],
    ),
]


class FlowComposer:
    """Materializes flow templates against the catalog held by the store"""

    def __init__(self, store: CatalogStore, templates: Optional[List[FlowTemplate]] = None):
        self.store = store
        self.templates = templates if templates is not None else FLOW_TEMPLATES

    def _resolve_template(self, template: FlowTemplate) -> Optional[AutoFlow]:
        """All-or-nothing: one unresolved step discards the whole template"""
        steps = []

        for step in template.steps:
            api = self.store.get_api(step.api_name)
            if api is None:
                return None

            endpoint = next(
                (e for e in api.endpoints if e.name.lower() == step.endpoint.lower()),
                None
            )
            if endpoint is None:
                return None

            steps.append(AutoFlowStep(
                id=f"step-{len(steps) + 1}",
                endpoint_key=generate_endpoint_key(api.name, endpoint.name),
                description=endpoint.description,
                optional=step.optional,
                params=dict(step.params),
            ))

        if not steps:
            return None

        return AutoFlow(
            id=template.id,
            name=template.name,
            description=template.description,
            steps=steps,
            categories=list(template.categories),
            source=FlowProvenance.AUTO,
        )

    def generate_auto_flows(self) -> List[AutoFlow]:
        """
        Regenerate every template flow from the current catalog

        Resolved flows replace earlier versions; template flows that no
        longer resolve are removed from the store.

        Returns:
            The flows that were materialized
        """
        flows = []

        for template in self.templates:
            flow = self._resolve_template(template)
            if flow is None:
                if self.store.remove_flow(template.id):
                    logger.info("Stale flow removed", flow_id=template.id)
                continue
            self.store.store_flow(flow)
            flows.append(flow)

        logger.info("Auto flows generated",
                    generated=len(flows),
                    templates=len(self.templates))
        return flows

    def generate_category_flow(self, categories: List[str]) -> Optional[AutoFlow]:
        """Compose the first no-auth API of each category; needs two steps"""
        steps = []

        for category in categories:
            api = self._first_no_auth_api(category)
            if api is None or not api.endpoints:
                continue
            endpoint = api.endpoints[0]
            steps.append(AutoFlowStep(
                id=f"step-{len(steps) + 1}",
                endpoint_key=generate_endpoint_key(api.name, endpoint.name),
                description=endpoint.description,
            ))

        if len(steps) < 2:
            return None

        flow = AutoFlow(
            id="custom-" + "-".join(_NON_LETTERS.sub("", c.lower()) for c in categories),
            name=f"{' + '.join(categories)} Flow",
            description=f"Combine {', '.join(categories)} APIs",
            steps=steps,
            categories=list(categories),
            source=FlowProvenance.AUTO,
        )
        self.store.store_flow(flow)
        return flow

    def _first_no_auth_api(self, category: str) -> Optional[CatalogEntry]:
        for api in self.store.get_apis_by_category(category):
            if api.auth == AuthMode.NONE:
                return api
        return None

    def list_auto_flows(self) -> List[AutoFlow]:
        return [f for f in self.store.get_all_flows() if f.source == FlowProvenance.AUTO]

    def get_flow(self, flow_id: str) -> Optional[AutoFlow]:
        return self.store.get_flow(flow_id)

    def describe_flow(self, flow_id: str) -> Optional[str]:
        flow = self.store.get_flow(flow_id)
        if flow is None:
            return None

        lines = [f"**{flow.name}**", flow.description, "", "**Steps:**"]
        for i, step in enumerate(flow.steps, start=1):
            suffix = " (optional)" if step.optional else ""
            lines.append(f"{i}. **{step.endpoint_key}** - {step.description}{suffix}")
        lines += ["", f"**Categories:** {', '.join(flow.categories)}"]

        return "\n".join(lines)

    def available_templates(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": t.id,
                "name": t.name,
                "description": t.description,
                "categories": t.categories,
            }
            for t in self.templates
        ]

    def get_flow_stats(self) -> Dict[str, Any]:
        flows = self.store.get_all_flows()
        by_category: Dict[str, int] = {}

        for flow in flows:
            for category in flow.categories:
                by_category[category] = by_category.get(category, 0) + 1

        return {
            "totalFlows": len(flows),
            "autoGenerated": sum(1 for f in flows if f.source == FlowProvenance.AUTO),
            "manual": sum(1 for f in flows if f.source == FlowProvenance.MANUAL),
            "byCategory": by_category,
            "templates": len(self.templates),
        }
