import asyncio

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from trip_planner.errors import ConfigurationError, GenerationError
from trip_planner.generation import NO_RESPONSE, GenerationClient, _content_text


class NullChoicesChatModel(FakeListChatModel):
    async def _agenerate(self, *args, **kwargs):
        raise ValueError("Received response with null value for `choices`.")


class TestGenerationClient:
    def test_returns_model_text(self):
        client = GenerationClient("key", "fake", llm=FakeListChatModel(responses=["hello"]))
        assert asyncio.run(client.generate("prompt")) == "hello"

    def test_missing_key_is_configuration_error(self):
        client = GenerationClient(None, "gpt-4o-mini")
        with pytest.raises(ConfigurationError):
            asyncio.run(client.generate("prompt"))

    def test_empty_response_is_generation_error(self):
        client = GenerationClient("key", "fake", llm=FakeListChatModel(responses=["   "]))
        with pytest.raises(GenerationError, match=NO_RESPONSE):
            asyncio.run(client.generate("prompt"))

    def test_unusable_payload_is_generation_error(self):
        client = GenerationClient("key", "fake", llm=NullChoicesChatModel(responses=["unused"]))
        with pytest.raises(GenerationError, match="null value for `choices`"):
            asyncio.run(client.generate("prompt"))

    def test_default_model_is_built_without_retries(self):
        client = GenerationClient("key", "gpt-4o-mini", temperature=0.9, top_p=1.0)
        llm = client._get_llm()
        assert llm.max_retries == 0
        assert llm.temperature == 0.9
        assert llm.top_p == 1.0


class TestContentText:
    def test_string(self):
        assert _content_text("abc") == "abc"

    def test_content_blocks(self):
        blocks = [{"type": "text", "text": "ab"}, {"type": "image_url"}, "c"]
        assert _content_text(blocks) == "abc"

    def test_none(self):
        assert _content_text(None) == ""
