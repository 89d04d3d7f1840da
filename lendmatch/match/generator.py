"""
Text-generation client.

The matching pipeline only needs ``await generator.generate(prompt)``;
anything with that coroutine satisfies :class:`TextGenerator`.  Failures
from the provider (network, quota, timeout) are not caught here and reach
the caller unchanged.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from google import genai
from google.genai import types

from lendmatch.config import Settings
from lendmatch.postings.errors import ModelUnavailableError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class GeminiGenerator:
    """Gemini-backed generator using the async google-genai client."""

    def __init__(self, settings: Settings, api_key: str) -> None:
        self._settings = settings
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        logger.debug("Sending prompt to Gemini model %s: %s", self._settings.llm_model, prompt[:200])
        response = await self._client.aio.models.generate_content(
            model=self._settings.llm_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self._settings.llm_temperature,
                max_output_tokens=self._settings.llm_max_output_tokens,
            ),
        )
        return (response.text or "").strip()


def get_text_generator(settings: Settings) -> TextGenerator:
    provider = (settings.llm_provider or "none").strip().lower()
    if provider != "gemini":
        raise ModelUnavailableError(f"LLM_PROVIDER={provider!r}; smart matching requires 'gemini'")

    api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise ModelUnavailableError("GOOGLE_API_KEY/GEMINI_API_KEY not provided")

    return GeminiGenerator(settings, api_key)
