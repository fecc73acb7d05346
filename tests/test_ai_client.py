"""Tests for provider routing and the text generator wrapper."""

import asyncio
import logging

import openai
import pytest

import app.services.ai_client as ai_client
from app.config import Settings
from app.services.ai_client import AIProvider, ModelTextGenerator, build_text_generator
from app.services.errors import ConfigurationError


class TestProviderDetection:

    @pytest.mark.parametrize("model, provider", [
        ("gemini-2.5-flash", AIProvider.GOOGLE),
        ("gemini-2.5-flash-lite", AIProvider.GOOGLE),
        ("claude-sonnet-4-20250514", AIProvider.ANTHROPIC),
        ("gpt-4o-mini", AIProvider.OPENAI),
        ("o3-mini", AIProvider.OPENAI),
    ])
    def test_detect_provider(self, model, provider):
        assert ai_client._detect_provider(model) == provider


class TestBuildTextGenerator:

    def test_missing_google_key(self):
        s = Settings(model_name="gemini-2.5-flash", google_api_key="")
        with pytest.raises(ConfigurationError, match="^Google API key not configured$"):
            build_text_generator(s)

    def test_missing_openai_key(self):
        s = Settings(model_name="gpt-4o", openai_api_key="")
        with pytest.raises(ConfigurationError, match="OpenAI API key not configured"):
            build_text_generator(s)

    def test_missing_anthropic_key(self):
        s = Settings(model_name="claude-sonnet-4-20250514", anthropic_api_key="")
        with pytest.raises(ConfigurationError, match="Anthropic API key not configured"):
            build_text_generator(s)

    def test_builds_with_key(self):
        s = Settings(model_name="gemini-2.5-flash", google_api_key="k", ai_timeout_seconds=12)
        generator = build_text_generator(s)
        assert generator.provider == AIProvider.GOOGLE
        assert generator.model == "gemini-2.5-flash"
        assert generator.api_key == "k"
        assert generator.timeout == 12


class TestModelTextGenerator:

    def test_dispatches_to_provider(self, monkeypatch):
        seen = []

        async def fake_gemini(prompt, model, api_key):
            seen.append((prompt, model, api_key))
            return "<p>plan</p>"

        monkeypatch.setattr(ai_client, "_gemini_generate", fake_gemini)
        generator = ModelTextGenerator(AIProvider.GOOGLE, "gemini-2.5-flash", "k", timeout=5)

        assert asyncio.run(generator.generate_text("hello")) == "<p>plan</p>"
        assert seen == [("hello", "gemini-2.5-flash", "k")]

    def test_none_completion_becomes_empty_string(self, monkeypatch):
        async def fake_openai(prompt, model, api_key):
            return None

        monkeypatch.setattr(ai_client, "_openai_generate", fake_openai)
        generator = ModelTextGenerator(AIProvider.OPENAI, "gpt-4o", "k", timeout=5)

        assert asyncio.run(generator.generate_text("hello")) == ""

    def test_timeout_raises(self, monkeypatch):
        async def slow(prompt, model, api_key):
            await asyncio.sleep(5)
            return "late"

        monkeypatch.setattr(ai_client, "_anthropic_generate", slow)
        generator = ModelTextGenerator(AIProvider.ANTHROPIC, "claude-x", "k", timeout=0.01)

        with pytest.raises(TimeoutError, match="did not respond"):
            asyncio.run(generator.generate_text("hello"))

    def test_provider_errors_propagate(self, monkeypatch):
        async def broken(prompt, model, api_key):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(ai_client, "_gemini_generate", broken)
        generator = ModelTextGenerator(AIProvider.GOOGLE, "gemini-2.5-flash", "k", timeout=5)

        with pytest.raises(RuntimeError, match="quota exceeded"):
            asyncio.run(generator.generate_text("hello"))

    def test_openai_client_closed_after_call(self, monkeypatch):
        clients = []

        class FakeAsyncOpenAI:
            def __init__(self, api_key):
                self.api_key = api_key
                self.closed = False
                self.chat = self
                self.completions = self
                clients.append(self)

            async def __aenter__(self):
                return self

            async def __aexit__(self, *exc_info):
                self.closed = True

            async def create(self, model, messages):
                message = type("Message", (), {"content": "<p>plan</p>"})
                choice = type("Choice", (), {"message": message})
                return type("Response", (), {"choices": [choice]})

        monkeypatch.setattr(openai, "AsyncOpenAI", FakeAsyncOpenAI)
        generator = ModelTextGenerator(AIProvider.OPENAI, "gpt-4o", "k", timeout=5)

        assert asyncio.run(generator.generate_text("hello")) == "<p>plan</p>"
        assert len(clients) == 1
        assert clients[0].closed is True


class TestSettings:

    def test_log_level_follows_env(self):
        assert Settings(env="dev").log_level == logging.DEBUG
        assert Settings(env="prod").log_level == logging.INFO
