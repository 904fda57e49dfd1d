from __future__ import annotations

import logging
from typing import Any

import vertexai
from vertexai.generative_models import GenerationConfig, GenerativeModel

from .llm import parse_json_reply

logger = logging.getLogger(__name__)


class VertexAIAdapter:
    """Adapter for Vertex AI Gemini models."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "asia-southeast1",
        model_name: str = "gemini-1.5-pro",
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name

        vertexai.init(project=project_id, location=location)

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
        max_output_tokens: int = 8192,
    ) -> Any:
        """Generate a JSON reply.

        Args:
            system_prompt: Instructions for the model
            user_prompt: Input prompt
            temperature: Sampling temperature (0.0 - 1.0)
            max_output_tokens: Maximum output tokens

        Returns:
            Parsed JSON response
        """
        model = GenerativeModel(self.model_name, system_instruction=system_prompt)
        generation_config = GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json",
        )

        response = model.generate_content(
            user_prompt,
            generation_config=generation_config,
        )
        generated_text = response.text

        logger.info(
            "Generated content with Vertex AI",
            extra={
                "model": self.model_name,
                "temperature": temperature,
                "input_length": len(system_prompt) + len(user_prompt),
                "output_length": len(generated_text),
            },
        )
        return parse_json_reply(generated_text)


__all__ = ["VertexAIAdapter"]
