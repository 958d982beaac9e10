"""Shared pydantic-ai model construction helpers."""

from __future__ import annotations

from enum import Enum

from pydantic_ai.models import Model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.openai import OpenAIProvider

from topic_news.core.settings import Settings, get_settings


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


PREFIX_TO_PROVIDER: dict[str, LLMProvider] = {
    "openai": LLMProvider.OPENAI,
    "anthropic": LLMProvider.ANTHROPIC,
    "google-gla": LLMProvider.GOOGLE,
    "google": LLMProvider.GOOGLE,
}


def split_model_spec(model_spec: str) -> tuple[LLMProvider, str]:
    """Split ``provider:model`` into provider and bare model name.

    Bare ``gpt-*``, ``claude-*`` and ``gemini*`` names are inferred; anything
    else without a known prefix is treated as OpenAI.
    """
    if ":" in model_spec:
        prefix, model_name = model_spec.split(":", 1)
        provider = PREFIX_TO_PROVIDER.get(prefix)
        if provider is not None:
            return provider, model_name
    if model_spec.startswith("claude-"):
        return LLMProvider.ANTHROPIC, model_spec
    if model_spec.startswith("gemini"):
        return LLMProvider.GOOGLE, model_spec
    return LLMProvider.OPENAI, model_spec


def _api_key_for(provider: LLMProvider, settings: Settings) -> str | None:
    return {
        LLMProvider.OPENAI: settings.openai_api_key,
        LLMProvider.ANTHROPIC: settings.anthropic_api_key,
        LLMProvider.GOOGLE: settings.google_api_key,
    }[provider]


def missing_llm_credentials(*model_specs: str, settings: Settings | None = None) -> list[str]:
    """Return the providers whose API key is absent for the given model specs."""
    settings = settings or get_settings()
    missing: list[str] = []
    for spec in model_specs:
        provider, _ = split_model_spec(spec)
        if not _api_key_for(provider, settings) and provider.value not in missing:
            missing.append(provider.value)
    return missing


def build_pydantic_model(model_spec: str) -> Model:
    """Construct a pydantic-ai Model wired to the configured provider credentials.

    Args:
        model_spec: Full model spec string (e.g., ``openai:gpt-4o-mini``).

    Raises:
        ValueError: The provider's API key is not configured.
    """
    settings = get_settings()
    provider, model_name = split_model_spec(model_spec)
    api_key = _api_key_for(provider, settings)
    if not api_key:
        raise ValueError(f"{provider.value.upper()}_API_KEY not configured in settings.")

    if provider is LLMProvider.ANTHROPIC:
        return AnthropicModel(model_name, provider=AnthropicProvider(api_key=api_key))
    if provider is LLMProvider.GOOGLE:
        return GoogleModel(model_name, provider=GoogleProvider(api_key=api_key))
    return OpenAIChatModel(model_name, provider=OpenAIProvider(api_key=api_key))
