from __future__ import annotations

import json
import logging
from typing import Protocol, Sequence

from .llm import LLMAdapter
from .models.analysis import SimilarityResult
from .models.quotation import ProjectPatternRecord

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Compare project keywords and determine similarity. Respond with JSON only: "
    '{"similar": true/false, "matchedProjectId": id or null, "similarity_score": 0-100}'
)


class PatternSource(Protocol):
    def list_patterns(self) -> list[ProjectPatternRecord]:
        ...


class SimilarityChecker:
    """Asks the LLM whether a new project resembles a previously saved pattern.

    The result is an enrichment: any failure degrades to ``similar=False``.
    """

    def __init__(self, adapter: LLMAdapter, patterns: PatternSource, *, temperature: float = 0.2) -> None:
        self._adapter = adapter
        self._patterns = patterns
        self._temperature = temperature

    def check(self, keywords: Sequence[str]) -> SimilarityResult:
        try:
            existing = self._patterns.list_patterns()
        except Exception:
            logger.warning("Failed to load project patterns", exc_info=True)
            return SimilarityResult()
        if not existing:
            return SimilarityResult()

        corpus = [
            {
                "id": pattern.id,
                "project_title": pattern.project_title,
                "keywords": ",".join(pattern.keywords),
                "modules": [module.model_dump() for module in pattern.modules],
                "total_price": pattern.total_price,
                "is_student": pattern.is_student,
            }
            for pattern in existing
        ]
        user_prompt = (
            f"New project keywords: {', '.join(keywords)}\n\n"
            f"Existing projects:\n{json.dumps(corpus)}"
        )
        try:
            payload = self._adapter.generate_json(
                SYSTEM_PROMPT,
                user_prompt,
                temperature=self._temperature,
            )
            result = SimilarityResult.model_validate(payload)
        except Exception as exc:
            logger.warning(
                "Similarity check failed (non-fatal)",
                exc_info=True,
                extra={"error": str(exc)},
            )
            return SimilarityResult()

        known_ids = {pattern.id for pattern in existing}
        if result.matched_project_id is not None and result.matched_project_id not in known_ids:
            logger.warning(
                "Similarity check matched an unknown pattern",
                extra={"matched_project_id": result.matched_project_id},
            )
            result = result.model_copy(update={"matched_project_id": None})
        return result


__all__ = ["SimilarityChecker", "SYSTEM_PROMPT"]
