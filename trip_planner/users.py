from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from trip_planner.errors import DocumentStoreError
from trip_planner.schemas import AccountProfile
from trip_planner.store import DocumentStore, Query, new_document_id


logger = logging.getLogger("trip-planner")


class UserDirectory:
    def __init__(self, store: DocumentStore, collection: str) -> None:
        self.store = store
        self.collection = collection

    async def get_existing_user(self, account_id: str) -> dict[str, Any] | None:
        try:
            result = await self.store.list_documents(
                self.collection, [Query.equal("accountId", account_id)]
            )
        except DocumentStoreError as exc:
            logger.error("users lookup failed account=%s: %s", account_id, exc)
            raise DocumentStoreError("Failed to check user existence", exc.status_code) from exc
        return result.documents[0] if result.documents else None

    async def store_user_data(self, account: AccountProfile) -> dict[str, Any]:
        data = {
            "accountId": account.account_id,
            "email": account.email,
            "name": account.name,
            "imageUrl": account.image_url,
            "joinedAt": datetime.now(timezone.utc).isoformat(),
        }
        try:
            return await self.store.create_document(self.collection, new_document_id(), data)
        except DocumentStoreError as exc:
            logger.error("users create failed account=%s: %s", account.account_id, exc)
            raise DocumentStoreError("Failed to create user profile", exc.status_code) from exc

    async def ensure_user(self, account: AccountProfile) -> dict[str, Any]:
        user = await self.get_existing_user(account.account_id)
        if user is None:
            logger.info("users creating profile account=%s", account.account_id)
            user = await self.store_user_data(account)
        return user

    async def get_all_users(self, limit: int, offset: int) -> tuple[list[dict[str, Any]], int]:
        try:
            result = await self.store.list_documents(
                self.collection,
                [Query.limit(limit), Query.offset(offset), Query.order_desc("joinedAt")],
            )
        except DocumentStoreError as exc:
            logger.error("users list failed: %s", exc)
            return [], 0
        return result.documents, result.total
