from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .module import ComplexityLevel


class PriceCatalogInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    module_name: str = Field(min_length=1, alias="moduleName")
    complexity_level: ComplexityLevel = Field(alias="complexityLevel")
    base_price: float = Field(ge=0, alias="basePrice")
    student_price: float = Field(ge=0, alias="studentPrice")
    description: str = ""


class PriceCatalogEntry(BaseModel):
    id: int
    module_name: str
    complexity_level: ComplexityLevel
    base_price: float
    student_price: float
    description: str | None = None

    def price_for(self, *, is_student: bool) -> float:
        return self.student_price if is_student else self.base_price


__all__ = ["PriceCatalogEntry", "PriceCatalogInput"]
