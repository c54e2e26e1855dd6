from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, TypedDict

from langgraph.graph import StateGraph, END
from pydantic import ValidationError as PydanticValidationError

from trip_planner.countries import strip_flag
from trip_planner.errors import ImageSearchError, TripPipelineError, ValidationError
from trip_planner.generation import GenerationClient
from trip_planner.images import ImageEnricher
from trip_planner.parser import parse_trip_plan
from trip_planner.persistence import TripPersister
from trip_planner.prompt import build_prompt
from trip_planner.schemas import TripPlan, TripRequest


logger = logging.getLogger("trip-planner")

REQUIRED_FIELDS = ("country", "numberOfDays", "travelStyle", "interests", "budget", "groupType", "userId")


class Outcome(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    FATAL = "fatal"


@dataclass
class StepResult:
    step: str
    outcome: Outcome
    detail: str | None = None


@dataclass
class PipelineResult:
    document_id: str | None = None
    error: str | None = None
    steps: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.document_id is not None

    def to_response(self) -> dict[str, str]:
        if self.ok:
            return {"id": self.document_id}
        return {"error": self.error or "Unknown error"}


class TripState(TypedDict, total=False):
    payload: Any
    request: TripRequest
    prompt: str
    raw_text: str
    plan: TripPlan
    image_urls: list[str]
    document_id: str
    steps: list[StepResult]
    error: str


def validate_params(payload: Any) -> TripRequest:
    """Turn an untrusted request body into a TripRequest.

    Missing or empty fields are reported by their wire name; the country may be
    submitted with its flag glyph, which is stripped here.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Empty request body")
    for name in REQUIRED_FIELDS:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Missing required field: {name}")
    data = dict(payload)
    if isinstance(data["country"], str):
        data["country"] = strip_flag(data["country"])
    try:
        return TripRequest.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationError(f"Invalid field {loc}: {first['msg']}") from exc


Node = Callable[[TripState], Awaitable[dict[str, Any]]]


def _fatal_step(name: str, func: Node) -> Node:
    async def _node(state: TripState) -> dict[str, Any]:
        logger.info("node:%s start", name)
        steps = list(state.get("steps", []))
        try:
            update = await func(state)
        except TripPipelineError as exc:
            logger.error("node:%s failed kind=%s: %s", name, exc.kind, exc)
            steps.append(StepResult(name, Outcome.FATAL, str(exc)))
            return {"steps": steps, "error": str(exc)}
        steps.append(StepResult(name, Outcome.OK))
        return {**update, "steps": steps}

    return _node


def _continue_or_end(next_node: str):
    def _route(state: TripState) -> str:
        return END if state.get("error") else next_node

    return _route


def create_graph(
    generator: GenerationClient,
    enricher: ImageEnricher,
    persister: TripPersister,
):
    async def validate_node(state: TripState) -> dict[str, Any]:
        return {"request": validate_params(state.get("payload"))}

    async def prompt_node(state: TripState) -> dict[str, Any]:
        return {"prompt": build_prompt(state["request"])}

    async def generate_node(state: TripState) -> dict[str, Any]:
        return {"raw_text": await generator.generate(state["prompt"])}

    async def parse_node(state: TripState) -> dict[str, Any]:
        plan = parse_trip_plan(state["raw_text"])
        days = state["request"].number_of_days
        if len(plan.itinerary) != days:
            logger.warning("node:parse itinerary has %s days, requested %s", len(plan.itinerary), days)
        return {"plan": plan}

    async def enrich_node(state: TripState) -> dict[str, Any]:
        req = state["request"]
        steps = list(state.get("steps", []))
        logger.info("node:enrich_images start country=%s", req.country)
        try:
            urls = await enricher.search(req.country, req.interests)
        except ImageSearchError as exc:
            logger.warning("node:enrich_images degraded: %s", exc)
            steps.append(StepResult("enrich_images", Outcome.DEGRADED, str(exc)))
            return {"image_urls": [], "steps": steps}
        steps.append(StepResult("enrich_images", Outcome.OK))
        logger.info("node:enrich_images done count=%s", len(urls))
        return {"image_urls": urls, "steps": steps}

    async def persist_node(state: TripState) -> dict[str, Any]:
        req = state["request"]
        document_id = await persister.persist(state["plan"], state.get("image_urls", []), req.user_id)
        return {"document_id": document_id}

    graph = StateGraph(TripState)
    graph.add_node("validate", _fatal_step("validate", validate_node))
    graph.add_node("build_prompt", _fatal_step("build_prompt", prompt_node))
    graph.add_node("generate", _fatal_step("generate", generate_node))
    graph.add_node("parse", _fatal_step("parse", parse_node))
    graph.add_node("enrich_images", enrich_node)
    graph.add_node("persist", _fatal_step("persist", persist_node))

    graph.set_entry_point("validate")
    graph.add_conditional_edges("validate", _continue_or_end("build_prompt"), ["build_prompt", END])
    graph.add_conditional_edges("build_prompt", _continue_or_end("generate"), ["generate", END])
    graph.add_conditional_edges("generate", _continue_or_end("parse"), ["parse", END])
    graph.add_conditional_edges("parse", _continue_or_end("enrich_images"), ["enrich_images", END])
    graph.add_edge("enrich_images", "persist")
    graph.add_edge("persist", END)

    return graph.compile()


class TripPipeline:
    """Runs one trip-creation request through the graph. No step is retried."""

    def __init__(
        self,
        generator: GenerationClient,
        enricher: ImageEnricher,
        persister: TripPersister,
    ) -> None:
        self._graph = create_graph(generator, enricher, persister)

    async def run(self, payload: Any) -> PipelineResult:
        final = await self._graph.ainvoke({"payload": payload, "steps": []})
        result = PipelineResult(
            document_id=final.get("document_id"),
            error=final.get("error"),
            steps=list(final.get("steps", [])),
        )
        logger.info(
            "pipeline done ok=%s steps=%s",
            result.ok,
            ",".join(f"{s.step}:{s.outcome.value}" for s in result.steps),
        )
        return result
