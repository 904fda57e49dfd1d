from __future__ import annotations

import logging
from typing import Any

from openai import OpenAI

from .llm import parse_json_reply

logger = logging.getLogger(__name__)


class OpenAICompatibleAdapter:
    """Adapter for OpenAI and OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        *,
        api_key: str,
        model_name: str = "gpt-4o-mini",
        base_url: str | None = None,
        json_mode: bool = True,
        timeout: float = 60.0,
        client: OpenAI | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Provider API key
            model_name: Chat model name
            base_url: Custom endpoint for OpenAI-compatible providers
            json_mode: Whether to request ``response_format={"type": "json_object"}``
            timeout: Request timeout in seconds
            client: Pre-built client, mainly for tests
        """
        self.model_name = model_name
        self.json_mode = json_mode
        client_kwargs: dict[str, Any] = {"api_key": api_key, "timeout": timeout}
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = client or OpenAI(**client_kwargs)

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
    ) -> Any:
        request: dict[str, Any] = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
        }
        if self.json_mode:
            request["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**request)
        content = response.choices[0].message.content or ""

        logger.info(
            "Generated content with chat completion API",
            extra={
                "model": self.model_name,
                "temperature": temperature,
                "input_length": len(system_prompt) + len(user_prompt),
                "output_length": len(content),
            },
        )
        return parse_json_reply(content)


__all__ = ["OpenAICompatibleAdapter"]
