from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ComplexityLevel(str, Enum):
    simple = "simple"
    medium = "medium"
    complex = "complex"


class ModuleClassification(BaseModel):
    name: str
    # Kept as a free string: unknown levels are priced by the scalar fallback.
    level: str
    description: str = ""

    @field_validator("level", "description", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: object) -> object:
        return "" if value is None else value


class PricedModule(ModuleClassification):
    model_config = ConfigDict(frozen=True)

    price: float = Field(ge=0)


__all__ = ["ComplexityLevel", "ModuleClassification", "PricedModule"]
