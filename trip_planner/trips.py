from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from trip_planner.errors import DocumentStoreError
from trip_planner.schemas import TripDocument, TripPlan, TripSummary
from trip_planner.store import DocumentStore, Query


logger = logging.getLogger("trip-planner")


def _summarize(doc: TripDocument) -> TripSummary:
    plan = TripPlan.model_validate(json.loads(doc.serialized_plan))
    try:
        days = plan.itinerary_days()
    except PydanticValidationError:
        days = []
    tags = [t for t in (plan.interests, plan.travel_style) if isinstance(t, str) and t]
    return TripSummary(
        id=doc.id,
        name=plan.name,
        image_url=doc.image_urls[0] if doc.image_urls else None,
        location=days[0].location if days else "",
        tags=tags,
        price=plan.estimated_price if isinstance(plan.estimated_price, str) else None,
    )


class TripCatalog:
    """Read access to saved trips."""

    def __init__(self, store: DocumentStore, collection: str) -> None:
        self.store = store
        self.collection = collection

    async def get_trip(self, trip_id: str) -> dict[str, Any] | None:
        try:
            raw = await self.store.get_document(self.collection, trip_id)
        except DocumentStoreError as exc:
            if exc.status_code == 404:
                return None
            raise
        doc = TripDocument.model_validate(raw)
        return {
            "id": doc.id,
            "tripDetails": json.loads(doc.serialized_plan),
            "createdAt": doc.created_at,
            "imageUrls": doc.image_urls,
            "userId": doc.user_id,
        }

    async def list_trips(
        self, limit: int = 10, offset: int = 0, user_id: str | None = None
    ) -> tuple[list[TripSummary], int]:
        queries = [Query.order_desc("createdAt"), Query.limit(limit), Query.offset(offset)]
        if user_id:
            queries.insert(0, Query.equal("userId", user_id))
        result = await self.store.list_documents(self.collection, queries)

        summaries: list[TripSummary] = []
        for raw in result.documents:
            try:
                summaries.append(_summarize(TripDocument.model_validate(raw)))
            except (ValueError, PydanticValidationError) as exc:
                logger.warning("trips skipping unreadable document id=%s: %s", raw.get("$id"), exc)
        return summaries, result.total
