import asyncio
import json

import pytest

from conftest import make_plan
from trip_planner.errors import DocumentStoreError, PersistenceError
from trip_planner.persistence import TripPersister
from trip_planner.schemas import TripPlan
from trip_planner.store import InMemoryDocumentStore


class RejectingStore(InMemoryDocumentStore):
    async def create_document(self, collection, document_id, data):
        raise DocumentStoreError("quota exceeded", status_code=429)


class TestTripPersister:
    def test_writes_one_document(self, store):
        plan = TripPlan.model_validate(make_plan(days=2))
        doc_id = asyncio.run(TripPersister(store, "trips").persist(plan, ["https://a.jpg"], "u1"))
        docs = store.documents("trips")
        assert len(docs) == 1
        doc = docs[0]
        assert doc["$id"] == doc_id
        assert doc["userId"] == "u1"
        assert doc["imageUrls"] == ["https://a.jpg"]
        assert json.loads(doc["tripDetails"])["name"] == "Paris in Style"
        assert doc["createdAt"].endswith("+00:00")

    def test_rejection_is_persistence_error(self):
        plan = TripPlan.model_validate(make_plan(days=1))
        with pytest.raises(PersistenceError, match="quota exceeded"):
            asyncio.run(TripPersister(RejectingStore(), "trips").persist(plan, [], "u1"))
