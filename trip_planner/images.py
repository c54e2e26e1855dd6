from __future__ import annotations

import logging
from typing import Any

import httpx

from trip_planner.errors import ImageSearchError


logger = logging.getLogger("trip-planner")

MAX_IMAGES = 3


class ImageEnricher:
    def __init__(
        self,
        access_key: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.access_key = access_key
        self._client = httpx.AsyncClient(
            timeout=timeout, base_url="https://api.unsplash.com", transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "client_id": self.access_key}
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    async def search(self, country: str, interests: str) -> list[str]:
        """Return up to three image URLs, raising ImageSearchError on any failure."""
        if not self.access_key:
            raise ImageSearchError("image search access key not configured")
        try:
            data = await self._get("/search/photos", {"query": f"{country} {interests}"})
            results = data["results"][:MAX_IMAGES]
            urls = [(item.get("urls") or {}).get("regular") for item in results]
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ImageSearchError(f"image search failed: {exc!r}") from exc
        return [url for url in urls if isinstance(url, str) and url]

    async def enrich(self, country: str, interests: str) -> list[str]:
        """Best-effort variant of ``search``: failures yield an empty list."""
        try:
            return await self.search(country, interests)
        except ImageSearchError as exc:
            logger.warning("images degraded country=%s: %s", country, exc)
            return []
