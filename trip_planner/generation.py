from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import openai
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from trip_planner.errors import ConfigurationError, GenerationError


logger = logging.getLogger("trip-planner")

NO_RESPONSE = "No response from generation model"


async def _timed(label: str, timeout_sec: float, func):
    start = time.monotonic()
    result = await asyncio.wait_for(func(), timeout=timeout_sec)
    elapsed = time.monotonic() - start
    logger.info("%s ok in %.2fs", label, elapsed)
    if elapsed > timeout_sec * 0.8:
        logger.warning("%s slow: %.2fs (timeout=%ss)", label, elapsed, timeout_sec)
    return result


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and item.get("type") == "text":
                parts.append(str(item.get("text", "")))
        return "".join(parts)
    return ""


class GenerationClient:
    """Single-shot call to the itinerary model.

    One attempt per request: the SDK is built with ``max_retries=0`` and
    nothing here loops.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str | None = None,
        temperature: float = 0.9,
        top_p: float = 1.0,
        timeout_sec: float = 60,
        llm: BaseChatModel | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.top_p = top_p
        self.timeout_sec = timeout_sec
        self._llm = llm

    def _get_llm(self) -> BaseChatModel:
        if self._llm is None:
            if not self.api_key:
                raise ConfigurationError("Generation API key not configured")
            self._llm = ChatOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                model=self.model,
                temperature=self.temperature,
                top_p=self.top_p,
                timeout=self.timeout_sec,
                max_retries=0,
            )
        return self._llm

    async def generate(self, prompt: str) -> str:
        llm = self._get_llm()
        try:
            ai = await _timed(
                "generate",
                self.timeout_sec,
                lambda: llm.ainvoke([HumanMessage(prompt)]),
            )
        except asyncio.TimeoutError as exc:
            raise GenerationError(f"Generation timed out after {self.timeout_sec}s") from exc
        except (openai.OpenAIError, ValueError) as exc:
            raise GenerationError(f"Generation request failed: {exc}") from exc

        text = _content_text(getattr(ai, "content", None))
        if not text.strip():
            raise GenerationError(NO_RESPONSE)
        return text
