"""Text-generation client for the learning-plan pipeline.

Usage:
    from app.services.ai_client import build_text_generator

    generator = build_text_generator()
    text = await generator.generate_text("Explain photosynthesis.")

The pipeline only ever sends a prompt string and gets a completion string
back, so anything with an async ``generate_text(prompt)`` method can stand in
for the real client (tests pass a scripted fake).

Provider is auto-detected from the configured model name:
  - Models starting with "claude-" route to Anthropic
  - Models starting with "gpt-", "o1" or "o3" route to OpenAI
  - Everything else (default gemini-2.5-flash) routes to Google Gemini
"""

import asyncio
import logging
from enum import Enum
from typing import Protocol

from app.config import Settings, settings as default_settings
from app.services.errors import ConfigurationError

logger = logging.getLogger(__name__)


class AIProvider(str, Enum):
    GOOGLE = "google"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


_ANTHROPIC_PREFIXES = ("claude-",)
_OPENAI_PREFIXES = ("gpt-", "o1", "o3")

_MISSING_KEY_MESSAGES = {
    AIProvider.GOOGLE: "Google API key not configured",
    AIProvider.OPENAI: "OpenAI API key not configured",
    AIProvider.ANTHROPIC: "Anthropic API key not configured",
}


class TextGenerator(Protocol):
    async def generate_text(self, prompt: str) -> str:
        ...


def _detect_provider(model: str) -> AIProvider:
    """Auto-detect the provider from the model name."""
    model_lower = model.lower()
    if model_lower.startswith(_ANTHROPIC_PREFIXES):
        return AIProvider.ANTHROPIC
    if model_lower.startswith(_OPENAI_PREFIXES):
        return AIProvider.OPENAI
    return AIProvider.GOOGLE


def _api_key_for(provider: AIProvider, s: Settings) -> str:
    if provider == AIProvider.ANTHROPIC:
        return s.anthropic_api_key
    if provider == AIProvider.OPENAI:
        return s.openai_api_key
    return s.google_api_key


class ModelTextGenerator:
    """Sends one prompt per call to the configured provider.

    Each call is bounded by ``timeout`` seconds. Failures propagate to the
    caller unchanged; there is no retry.
    """

    def __init__(self, provider: AIProvider, model: str, api_key: str, timeout: float):
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    async def generate_text(self, prompt: str) -> str:
        logger.info(
            "Calling %s model %s (prompt %d chars)",
            self.provider.value, self.model, len(prompt),
        )
        if self.provider == AIProvider.OPENAI:
            call = _openai_generate(prompt, self.model, self.api_key)
        elif self.provider == AIProvider.ANTHROPIC:
            call = _anthropic_generate(prompt, self.model, self.api_key)
        else:
            call = _gemini_generate(prompt, self.model, self.api_key)

        try:
            text = await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise TimeoutError(
                f"{self.provider.value} model {self.model} did not respond within {self.timeout:g}s"
            ) from exc
        return text or ""


def build_text_generator(s: Settings | None = None) -> ModelTextGenerator:
    """Build the generator for the configured model.

    Raises ConfigurationError before any client is created when the key for
    the resolved provider is missing.
    """
    s = s or default_settings
    provider = _detect_provider(s.model_name)
    api_key = _api_key_for(provider, s)
    if not api_key:
        raise ConfigurationError(_MISSING_KEY_MESSAGES[provider])
    return ModelTextGenerator(provider, s.model_name, api_key, s.ai_timeout_seconds)


async def _gemini_generate(prompt: str, model: str, api_key: str) -> str:
    from google import genai

    async with genai.Client(api_key=api_key).aio as client:
        response = await client.models.generate_content(
            model=model,
            contents=prompt,
        )
    return response.text


async def _openai_generate(prompt: str, model: str, api_key: str) -> str:
    from openai import AsyncOpenAI

    async with AsyncOpenAI(api_key=api_key) as client:
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
        )
    return response.choices[0].message.content


async def _anthropic_generate(prompt: str, model: str, api_key: str) -> str:
    import anthropic

    async with anthropic.AsyncAnthropic(api_key=api_key) as client:
        response = await client.messages.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=4096,
        )
    return response.content[0].text
