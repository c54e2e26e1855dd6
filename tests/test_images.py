import asyncio

import httpx
import pytest

from conftest import failing_transport, unsplash_transport
from trip_planner.errors import ImageSearchError
from trip_planner.images import ImageEnricher


class TestImageEnricher:
    def test_caps_at_three(self):
        enricher = ImageEnricher("key", transport=unsplash_transport(5))
        urls = asyncio.run(enricher.enrich("France", "Food"))
        assert urls == [f"https://images.test/{i}.jpg" for i in range(3)]

    def test_network_failure_returns_empty(self):
        enricher = ImageEnricher("key", transport=failing_transport())
        assert asyncio.run(enricher.enrich("France", "Food")) == []

    def test_network_failure_raises_from_search(self):
        enricher = ImageEnricher("key", transport=failing_transport())
        with pytest.raises(ImageSearchError):
            asyncio.run(enricher.search("France", "Food"))

    def test_missing_key_returns_empty(self):
        enricher = ImageEnricher(None, transport=unsplash_transport(5))
        assert asyncio.run(enricher.enrich("France", "Food")) == []

    def test_error_status_returns_empty(self):
        enricher = ImageEnricher("key", transport=unsplash_transport(5, status=401))
        assert asyncio.run(enricher.enrich("France", "Food")) == []

    def test_malformed_body_returns_empty(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"errors": ["bad"]}))
        enricher = ImageEnricher("key", transport=transport)
        assert asyncio.run(enricher.enrich("France", "Food")) == []

    def test_entries_without_url_are_dropped(self):
        body = {"results": [{"urls": {"regular": "https://a.jpg"}}, {"urls": {}}, {"id": "x"}, {"urls": {"regular": "https://d.jpg"}}]}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
        enricher = ImageEnricher("key", transport=transport)
        assert asyncio.run(enricher.enrich("France", "Food")) == ["https://a.jpg"]

    def test_query_and_credential_are_sent(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            seen["path"] = request.url.path
            return httpx.Response(200, json={"results": []})

        enricher = ImageEnricher("secret", transport=httpx.MockTransport(handler))
        asyncio.run(enricher.search("France", "Food"))
        assert seen["path"] == "/search/photos"
        assert seen["params"] == {"query": "France Food", "client_id": "secret"}
