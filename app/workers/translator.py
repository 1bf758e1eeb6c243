from __future__ import annotations

from typing import Optional, Protocol

from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.litellm import LiteLLMProvider

from app.config import get_settings
from app.constants.chat import AUTO_LANGUAGE
from app.exceptions import TranslationFailed
from app.infra.logging_config import get_logger

logger = get_logger("translator")

TRANSLATOR_PROMPT = (
    "You are a professional translator. Translate into {target}. "
    "Preserve meaning, names, emojis, punctuation, and tone. "
    "Output only the translated text."
)


class TranslationProvider(Protocol):
    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str: ...


class LLMTranslationProvider:
    """Translates through an OpenAI-compatible chat model behind LiteLLM."""

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
    ) -> None:
        provider = LiteLLMProvider(api_key=api_key, api_base=api_base)
        self._model = OpenAIChatModel(model_name, provider=provider)
        logger.info(f"Initializing translation provider with model {model_name}")

    def _agent_for(self, source_language: str, target_language: str) -> Agent:
        prompt = TRANSLATOR_PROMPT.format(target=target_language)
        if source_language and source_language != AUTO_LANGUAGE:
            prompt += f" The source language is {source_language}."
        return Agent(self._model, system_prompt=prompt)

    async def translate(
        self, text: str, source_language: str, target_language: str
    ) -> str:
        agent = self._agent_for(source_language, target_language)
        result = await agent.run(text, model_settings={"temperature": 0.2})
        translated = str(result.output).strip()
        if not translated:
            raise TranslationFailed(
                f"Empty translation for {source_language}->{target_language}"
            )
        return translated


def build_translation_provider_from_env() -> LLMTranslationProvider:
    settings = get_settings()
    logger.info(
        "Translation provider config: model=%s, api_key=%s, api_base=%s",
        settings.llm_model,
        "set" if settings.litellm_api_key else "not set",
        settings.litellm_api_base or "(default)",
    )
    if not settings.litellm_api_key:
        logger.warning(
            "LITELLM_API_KEY is not set; translations will fail until it is configured."
        )
    return LLMTranslationProvider(
        model_name=settings.llm_model,
        api_key=settings.litellm_api_key,
        api_base=settings.litellm_api_base,
    )


_provider: Optional[TranslationProvider] = None


def get_translation_provider() -> TranslationProvider:
    """FastAPI dependency; builds the provider on first use."""
    global _provider
    if _provider is None:
        _provider = build_translation_provider_from_env()
    return _provider
