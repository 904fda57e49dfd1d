from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from .module import PricedModule


class QuotationStatus(str, Enum):
    draft = "draft"
    approved = "approved"
    rejected = "rejected"


class QuotationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_title: str = Field(alias="projectTitle")
    modules: Sequence[PricedModule] = Field(default_factory=list)
    total: float = Field(ge=0)
    quotation_text: str = Field(default="", alias="quotationText")
    is_student: bool = Field(default=False, alias="isStudent")


class QuotationRecord(BaseModel):
    id: int
    project_title: str
    modules: Sequence[PricedModule] = Field(default_factory=list)
    total_price: float
    quotation_text: str = ""
    is_student: bool = False
    status: str = QuotationStatus.draft.value
    created_at: datetime


class QuotationStatusUpdate(BaseModel):
    # Stored as sent; ``QuotationStatus`` only names the states the UI offers.
    status: str


class PatternCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_title: str = Field(alias="projectTitle")
    description: str = ""
    modules: Sequence[PricedModule] = Field(default_factory=list)
    total_price: float = Field(ge=0, alias="totalPrice")
    keywords: Sequence[str] = Field(default_factory=list)
    is_student: bool = Field(default=False, alias="isStudent")


class ProjectPatternRecord(BaseModel):
    id: int
    project_title: str
    description: str = ""
    modules: Sequence[PricedModule] = Field(default_factory=list)
    total_price: float
    keywords: Sequence[str] = Field(default_factory=list)
    is_student: bool = False
    created_at: datetime | None = None


__all__ = [
    "PatternCreate",
    "ProjectPatternRecord",
    "QuotationCreate",
    "QuotationRecord",
    "QuotationStatus",
    "QuotationStatusUpdate",
]
