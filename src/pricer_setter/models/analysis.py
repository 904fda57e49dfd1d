from __future__ import annotations

from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from .module import ModuleClassification, PricedModule


class ClassificationStatus(str, Enum):
    ok = "ok"
    insufficient_info = "insufficient_info"


class AnalysisStatus(str, Enum):
    ok = "ok"
    insufficient_info = "insufficient_info"
    error = "error"


class ClassificationResult(BaseModel):
    """Structured reply of the requirement classifier."""

    status: ClassificationStatus
    modules: Sequence[ModuleClassification] = Field(default_factory=list)
    summary: str = ""
    required_details: Sequence[str] = Field(default_factory=list)
    keywords: Sequence[str] = Field(default_factory=list)


class SimilarityResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    similar: bool = False
    matched_project_id: int | None = Field(default=None, alias="matchedProjectId")
    similarity_score: float | None = None


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    requirement: str | None = None
    is_student: bool = Field(default=False, alias="isStudent")


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: AnalysisStatus
    modules: Sequence[PricedModule] = Field(default_factory=list)
    total: float = 0.0
    summary: str = ""
    keywords: Sequence[str] = Field(default_factory=list)
    similar_project: bool = False
    matched_project_id: int | None = None
    required_details: Sequence[str] = Field(default_factory=list)
    project_title: str = ""
    quotation_template: str = ""
    is_student: bool = Field(default=False, alias="isStudent")


__all__ = [
    "AnalysisResult",
    "AnalysisStatus",
    "AnalyzeRequest",
    "ClassificationResult",
    "ClassificationStatus",
    "SimilarityResult",
]
