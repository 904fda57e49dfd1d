from __future__ import annotations

import logging
from typing import Sequence

from .classifier import RequirementClassifier
from .models.analysis import AnalysisResult, AnalysisStatus, ClassificationStatus
from .pricing import PricingResolver
from .quotation import QuotationAssembler, derive_title
from .similarity import SimilarityChecker

logger = logging.getLogger(__name__)

MIN_REQUIREMENT_LENGTH = 10

TOO_SHORT_DETAILS: Sequence[str] = (
    f"Please provide a more detailed project description (at least {MIN_REQUIREMENT_LENGTH} characters)",
)
MISSING_DETAILS: Sequence[str] = ("Please provide more details about the project",)


class ProjectAnalyzer:
    """Runs one analysis request: classify, price, check similarity, render."""

    def __init__(
        self,
        *,
        classifier: RequirementClassifier,
        resolver: PricingResolver,
        similarity: SimilarityChecker,
        assembler: QuotationAssembler,
    ) -> None:
        self._classifier = classifier
        self._resolver = resolver
        self._similarity = similarity
        self._assembler = assembler

    def analyze(self, requirement: str | None, is_student: bool = False) -> AnalysisResult:
        text = (requirement or "").strip()
        if len(text) < MIN_REQUIREMENT_LENGTH:
            return self._insufficient(required_details=TOO_SHORT_DETAILS, is_student=is_student)

        classification = self._classifier.classify(text)
        if classification.status is ClassificationStatus.insufficient_info:
            return self._insufficient(
                summary=classification.summary,
                required_details=classification.required_details or MISSING_DETAILS,
                is_student=is_student,
            )

        priced = self._resolver.price_modules(classification.modules, is_student)
        similarity = self._similarity.check(classification.keywords)

        project_title = derive_title(classification.summary)
        quotation_text = self._assembler.render(
            project_title=project_title,
            modules=priced.modules,
            total=priced.total,
            summary=classification.summary,
            is_student=is_student,
        )

        logger.info(
            "Analyzed project",
            extra={
                "modules_count": len(priced.modules),
                "total": priced.total,
                "is_student": is_student,
                "similar_project": similarity.similar,
            },
        )

        return AnalysisResult(
            status=AnalysisStatus.ok,
            modules=priced.modules,
            total=priced.total,
            summary=classification.summary,
            keywords=list(classification.keywords),
            similar_project=similarity.similar,
            matched_project_id=similarity.matched_project_id,
            required_details=[],
            project_title=project_title,
            quotation_template=quotation_text,
            is_student=is_student,
        )

    def _insufficient(
        self,
        *,
        required_details: Sequence[str],
        is_student: bool,
        summary: str = "",
    ) -> AnalysisResult:
        return AnalysisResult(
            status=AnalysisStatus.insufficient_info,
            modules=[],
            total=0.0,
            summary=summary,
            required_details=list(required_details),
            is_student=is_student,
        )


__all__ = ["ProjectAnalyzer", "MIN_REQUIREMENT_LENGTH"]
