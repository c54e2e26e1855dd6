from __future__ import annotations

import copy
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

import httpx

from trip_planner.errors import DocumentStoreError


def new_document_id() -> str:
    return uuid.uuid4().hex


class Query:
    """Query builders in the document store's JSON query format."""

    @staticmethod
    def equal(attribute: str, value: Any) -> dict[str, Any]:
        values = value if isinstance(value, list) else [value]
        return {"method": "equal", "attribute": attribute, "values": values}

    @staticmethod
    def limit(n: int) -> dict[str, Any]:
        return {"method": "limit", "values": [n]}

    @staticmethod
    def offset(n: int) -> dict[str, Any]:
        return {"method": "offset", "values": [n]}

    @staticmethod
    def order_desc(attribute: str) -> dict[str, Any]:
        return {"method": "orderDesc", "attribute": attribute}


@dataclass
class DocumentList:
    documents: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


class DocumentStore(Protocol):
    async def list_documents(
        self, collection: str, queries: list[dict[str, Any]] | None = None
    ) -> DocumentList: ...

    async def create_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]: ...

    async def aclose(self) -> None: ...


class AppwriteDocumentStore:
    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        database_id: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.database_id = database_id
        self._client = httpx.AsyncClient(
            base_url=endpoint.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "X-Appwrite-Project": project_id,
                "X-Appwrite-Key": api_key,
                "Content-Type": "application/json",
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _path(self, collection: str) -> str:
        return f"/databases/{self.database_id}/collections/{collection}/documents"

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise DocumentStoreError(f"document store unreachable: {exc!r}") from exc
        if resp.status_code >= 400:
            try:
                message = resp.json().get("message") or resp.text
            except ValueError:
                message = resp.text
            raise DocumentStoreError(message, status_code=resp.status_code)
        return resp.json()

    async def list_documents(
        self, collection: str, queries: list[dict[str, Any]] | None = None
    ) -> DocumentList:
        params = [("queries[]", json.dumps(q)) for q in queries or []]
        body = await self._request("GET", self._path(collection), params=params)
        return DocumentList(documents=body.get("documents", []), total=body.get("total", 0))

    async def create_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "POST", self._path(collection), json={"documentId": document_id, "data": data}
        )

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        return await self._request("GET", f"{self._path(collection)}/{document_id}")


class InMemoryDocumentStore:
    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def aclose(self) -> None:
        return None

    def documents(self, collection: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._collections.get(collection, {}).values()]

    async def list_documents(
        self, collection: str, queries: list[dict[str, Any]] | None = None
    ) -> DocumentList:
        docs = self.documents(collection)
        limit: int | None = None
        offset = 0
        for q in queries or []:
            method = q.get("method")
            if method == "equal":
                docs = [d for d in docs if d.get(q["attribute"]) in q["values"]]
            elif method == "orderDesc":
                docs.sort(key=lambda d: d.get(q["attribute"]) or "", reverse=True)
            elif method == "limit":
                limit = q["values"][0]
            elif method == "offset":
                offset = q["values"][0]
            else:
                raise DocumentStoreError(f"unsupported query: {method}", status_code=400)
        total = len(docs)
        docs = docs[offset:] if limit is None else docs[offset : offset + limit]
        return DocumentList(documents=docs, total=total)

    async def create_document(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        docs = self._collections.setdefault(collection, {})
        if document_id in docs:
            raise DocumentStoreError(f"document {document_id} already exists", status_code=409)
        doc = {
            **copy.deepcopy(data),
            "$id": document_id,
            "$createdAt": datetime.now(timezone.utc).isoformat(),
        }
        docs[document_id] = doc
        return copy.deepcopy(doc)

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        doc = self._collections.get(collection, {}).get(document_id)
        if doc is None:
            raise DocumentStoreError(f"document {document_id} not found", status_code=404)
        return copy.deepcopy(doc)
