from __future__ import annotations

import logging
from datetime import datetime, timezone

from trip_planner.errors import DocumentStoreError, PersistenceError
from trip_planner.schemas import TripPlan
from trip_planner.store import DocumentStore, new_document_id


logger = logging.getLogger("trip-planner")


class TripPersister:
    def __init__(self, store: DocumentStore, collection: str) -> None:
        self.store = store
        self.collection = collection

    async def persist(self, plan: TripPlan, image_urls: list[str], user_id: str) -> str:
        data = {
            "tripDetails": plan.to_json(),
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "imageUrls": list(image_urls)[:3],
            "userId": user_id,
        }
        try:
            doc = await self.store.create_document(self.collection, new_document_id(), data)
        except DocumentStoreError as exc:
            raise PersistenceError(f"Failed to save trip: {exc}") from exc
        document_id = doc.get("$id")
        if not document_id:
            raise PersistenceError("Failed to save trip: store returned no document id")
        logger.info("trip saved id=%s user=%s images=%s", document_id, user_id, len(data["imageUrls"]))
        return document_id
