"""Factory helpers for pydantic-ai agents."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar, cast

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from topic_news.services.llm_models import build_pydantic_model

OutputT = TypeVar("OutputT")


@lru_cache(maxsize=32)
def _cached_agent(
    model_spec: str,
    output_type: type[Any],
    system_prompt: str,
    temperature: float | None,
) -> Agent[None, Any]:
    """Build and cache a structured-output Agent with no dependencies."""
    model_settings = ModelSettings(temperature=temperature) if temperature is not None else None
    return Agent(
        build_pydantic_model(model_spec),
        output_type=output_type,
        system_prompt=system_prompt,
        model_settings=model_settings,
    )


def get_basic_agent(
    model_spec: str,
    output_type: type[OutputT],
    system_prompt: str,
    *,
    temperature: float | None = None,
) -> Agent[None, OutputT]:
    """Return a cached agent producing ``output_type``."""
    agent = _cached_agent(model_spec, output_type, system_prompt, temperature)
    return cast(Agent[None, OutputT], agent)
