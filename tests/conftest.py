import json

import httpx
import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from trip_planner.generation import GenerationClient
from trip_planner.images import ImageEnricher
from trip_planner.persistence import TripPersister
from trip_planner.store import InMemoryDocumentStore
from trip_planner.workflow import TripPipeline


TRIP_COLLECTION = "trips"


def make_plan(days=5, **overrides):
    plan = {
        "name": "Paris in Style",
        "description": "Five days of food and luxury in France.",
        "estimatedPrice": "$4500",
        "duration": days,
        "budget": "Mid-range",
        "travelStyle": "Luxury",
        "interests": "Food",
        "groupType": "Couple",
        "bestTimeToVisit": ["🌸 Spring", "☀️ Summer", "🍁 Autumn", "❄️ Winter"],
        "weatherInfo": ["☀️ 20-25C", "🌦️ 10-18C", "🌧️ 8-14C", "❄️ 0-6C"],
        "location": {
            "city": "Paris",
            "coordinates": [48.8566, 2.3522],
            "openStreetMap": "https://www.openstreetmap.org/relation/7444",
        },
        "itinerary": [
            {
                "day": i,
                "location": "Paris",
                "activities": [
                    {"time": "Morning", "description": "🥐 Bakery tour"},
                    {"time": "Afternoon", "description": "🖼️ Louvre"},
                    {"time": "Evening", "description": "🍷 Dinner"},
                ],
            }
            for i in range(1, days + 1)
        ],
    }
    plan.update(overrides)
    return plan


def fenced(obj):
    return "```json\n" + json.dumps(obj, ensure_ascii=False) + "\n```"


def unsplash_body(n):
    return {"results": [{"urls": {"regular": f"https://images.test/{i}.jpg"}} for i in range(n)]}


def unsplash_transport(n=5, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=unsplash_body(n))

    return httpx.MockTransport(handler)


def failing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    return httpx.MockTransport(handler)


def fake_generator(*responses):
    return GenerationClient(
        api_key="test-key",
        model="fake",
        llm=FakeListChatModel(responses=list(responses)),
    )


@pytest.fixture
def trip_payload():
    return {
        "country": "France",
        "numberOfDays": 5,
        "travelStyle": "Luxury",
        "interests": "Food",
        "budget": "Mid-range",
        "groupType": "Couple",
        "userId": "u1",
    }


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def build_pipeline(store):
    def _build(generator, enricher=None):
        enricher = enricher or ImageEnricher("img-key", transport=unsplash_transport(5))
        return TripPipeline(generator, enricher, TripPersister(store, TRIP_COLLECTION))

    return _build
