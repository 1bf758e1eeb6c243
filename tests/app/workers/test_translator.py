"""Tests for the LLM translation provider, driven by a local function model."""

import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse, SystemPromptPart, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from app.exceptions import TranslationFailed
from app.workers.translator import LLMTranslationProvider


def _provider_replying(reply, seen):
    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        seen.extend(
            part.content
            for message in messages
            for part in message.parts
            if isinstance(part, SystemPromptPart)
        )
        return ModelResponse(parts=[TextPart(reply)])

    provider = LLMTranslationProvider(
        "gpt-4o-mini", api_key="test-key", api_base="http://localhost:4000"
    )
    provider._model = FunctionModel(respond)
    return provider


@pytest.mark.asyncio
async def test_translate_returns_model_output():
    seen = []
    provider = _provider_replying("  Hola  ", seen)

    assert await provider.translate("Hello", "en", "es") == "Hola"
    assert "Translate into es." in seen[0]
    assert "The source language is en." in seen[0]


@pytest.mark.asyncio
async def test_auto_source_is_not_named():
    seen = []
    provider = _provider_replying("Hola", seen)
    await provider.translate("Hello", "auto", "es")
    assert "source language" not in seen[0]


@pytest.mark.asyncio
async def test_empty_output_is_a_failure():
    provider = _provider_replying("   ", [])
    with pytest.raises(TranslationFailed):
        await provider.translate("Hello", "en", "es")
