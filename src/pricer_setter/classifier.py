from __future__ import annotations

import logging

from pydantic import ValidationError

from .errors import ClassifierResponseError
from .llm import LLMAdapter
from .models.analysis import ClassificationResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an internal AI assistant for a project pricing system. Your job is to:
1. Extract all modules/features from project requirements
2. Classify each module as simple, medium, or complex based on:
   - simple: Basic functionality, standard implementation, minimal customization
   - medium: Moderate complexity, some customization, integrations needed
   - complex: Advanced features, heavy customization, multiple integrations
3. Match modules to common software components

Always respond with valid JSON only, no markdown, no explanations. Use this exact structure:
{
  "status": "ok" or "insufficient_info",
  "modules": [
    {"name": "Module Name", "level": "simple|medium|complex", "description": "brief description"}
  ],
  "summary": "Brief project summary",
  "required_details": ["list of missing info if status is insufficient_info"],
  "keywords": ["relevant", "project", "keywords"]
}

Common module categories to consider:
- User Authentication (login, register, OAuth, 2FA)
- Dashboard (stats, charts, widgets)
- CRUD Operations (data management)
- API Integration (third-party services)
- Payment Gateway (transactions, subscriptions)
- File Upload (documents, images, media)
- Notifications (email, SMS, push)
- Search (filtering, sorting)
- Reports (analytics, exports)
- Chat/Messaging (real-time communication)
- E-commerce Cart (shopping features)
- Admin Panel (management interface)
- Database Design (schema, optimization)"""


class RequirementClassifier:
    """Turns free-text requirements into a validated module list via an LLM."""

    def __init__(self, adapter: LLMAdapter, *, temperature: float = 0.3) -> None:
        self._adapter = adapter
        self._temperature = temperature

    def classify(self, requirement: str) -> ClassificationResult:
        user_prompt = f"Analyze this project requirement and extract modules:\n\n{requirement}"
        try:
            payload = self._adapter.generate_json(
                SYSTEM_PROMPT,
                user_prompt,
                temperature=self._temperature,
            )
        except ValueError as exc:
            raise ClassifierResponseError(str(exc)) from exc

        if not isinstance(payload, dict):
            raise ClassifierResponseError(
                f"Classifier returned {type(payload).__name__}, expected a JSON object"
            )
        try:
            result = ClassificationResult.model_validate(payload)
        except ValidationError as exc:
            raise ClassifierResponseError(f"Malformed classifier response: {exc}") from exc

        logger.info(
            "Classified requirement",
            extra={
                "status": result.status.value,
                "modules_count": len(result.modules),
                "keywords_count": len(result.keywords),
            },
        )
        return result


__all__ = ["RequirementClassifier", "SYSTEM_PROMPT"]
