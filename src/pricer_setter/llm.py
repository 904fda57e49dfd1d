from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from .config import Settings
from .errors import ProviderNotConfiguredError

logger = logging.getLogger(__name__)

ZAI_BASE_URL = "https://api.z.ai/v1"

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "zai": "zeus-70b-preview",
    "vertex": "gemini-1.5-pro",
}


class LLMAdapter(Protocol):
    """A chat model that answers a system + user prompt with a JSON object."""

    model_name: str

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
    ) -> Any:
        ...


def parse_json_reply(text: str) -> Any:
    """Parse a model reply as JSON, tolerating a surrounding markdown fence.

    Raises:
        ValueError: If the reply is not valid JSON
    """
    response = (text or "").strip()
    if response.startswith("```json"):
        response = response[7:]
    if response.startswith("```"):
        response = response[3:]
    if response.endswith("```"):
        response = response[:-3]

    try:
        return json.loads(response.strip())
    except json.JSONDecodeError as exc:
        logger.error(
            "Failed to parse JSON response",
            extra={"response": response[:500]},
        )
        raise ValueError(f"Invalid JSON response: {exc}") from exc


def build_llm_adapter(settings: Settings) -> LLMAdapter:
    """Construct the provider named by ``settings.llm_provider``."""
    provider = settings.llm_provider
    model = settings.llm_model or DEFAULT_MODELS[provider]

    if provider == "vertex":
        if not settings.project_id:
            raise ProviderNotConfiguredError("PROJECT_ID is required for the vertex provider")
        from .vertex_ai_adapter import VertexAIAdapter

        return VertexAIAdapter(
            project_id=settings.project_id,
            location=settings.vertex_location,
            model_name=model,
        )

    if settings.llm_api_key is None:
        raise ProviderNotConfiguredError(f"LLM_API_KEY is required for the {provider} provider")
    from .openai_adapter import OpenAICompatibleAdapter

    if provider == "zai":
        # Z.ai speaks the OpenAI protocol but has no JSON response mode.
        return OpenAICompatibleAdapter(
            api_key=settings.llm_api_key.get_secret_value(),
            model_name=model,
            base_url=settings.llm_base_url or ZAI_BASE_URL,
            json_mode=False,
        )
    return OpenAICompatibleAdapter(
        api_key=settings.llm_api_key.get_secret_value(),
        model_name=model,
        base_url=settings.llm_base_url,
    )


__all__ = ["LLMAdapter", "build_llm_adapter", "parse_json_reply", "DEFAULT_MODELS"]
