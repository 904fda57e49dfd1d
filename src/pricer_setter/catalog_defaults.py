from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .models.module import ComplexityLevel


@dataclass(frozen=True)
class PriceBand:
    regular: float
    student: float

    def pick(self, *, is_student: bool) -> float:
        return self.student if is_student else self.regular


# Used when no catalog entry matches the module (MYR).
DEFAULT_PRICES: Mapping[ComplexityLevel, PriceBand] = {
    ComplexityLevel.simple: PriceBand(regular=85.0, student=40.0),
    ComplexityLevel.medium: PriceBand(regular=190.0, student=90.0),
    ComplexityLevel.complex: PriceBand(regular=380.0, student=165.0),
}

# Level not in DEFAULT_PRICES.
UNKNOWN_LEVEL_PRICE = PriceBand(regular=150.0, student=70.0)

# The catalog lookup itself failed.
LOOKUP_ERROR_PRICE = PriceBand(regular=150.0, student=75.0)


@dataclass(frozen=True)
class CatalogSeed:
    module_name: str
    complexity_level: ComplexityLevel
    base_price: float
    student_price: float
    description: str


def _tiers(name: str, description: str, regular: Sequence[float], student: Sequence[float]) -> list[CatalogSeed]:
    levels = (ComplexityLevel.simple, ComplexityLevel.medium, ComplexityLevel.complex)
    return [
        CatalogSeed(
            module_name=name,
            complexity_level=level,
            base_price=base,
            student_price=stud,
            description=description,
        )
        for level, base, stud in zip(levels, regular, student)
    ]


STARTER_CATALOG: Sequence[CatalogSeed] = (
    *_tiers("User Authentication", "Login, register, OAuth, 2FA", (85, 190, 380), (40, 90, 165)),
    *_tiers("Dashboard", "Stats, charts and widgets", (100, 220, 420), (45, 100, 180)),
    *_tiers("CRUD Operations", "Data management screens", (70, 160, 320), (35, 75, 140)),
    *_tiers("API Integration", "Third-party services", (120, 250, 480), (55, 110, 200)),
    *_tiers("Payment Gateway", "Transactions and subscriptions", (150, 300, 600), (70, 130, 250)),
    *_tiers("File Upload", "Documents, images and media", (60, 140, 280), (30, 65, 120)),
    *_tiers("Notifications", "Email, SMS and push", (70, 150, 300), (35, 70, 130)),
    *_tiers("Search", "Filtering and sorting", (60, 140, 300), (30, 65, 130)),
    *_tiers("Reports", "Analytics and exports", (90, 200, 400), (40, 90, 170)),
    *_tiers("Chat/Messaging", "Real-time communication", (150, 320, 650), (70, 140, 270)),
    *_tiers("E-commerce Cart", "Shopping features", (130, 280, 550), (60, 120, 230)),
    *_tiers("Admin Panel", "Management interface", (100, 220, 450), (45, 100, 190)),
    *_tiers("Database Design", "Schema and optimisation", (80, 180, 350), (40, 80, 150)),
)


__all__ = [
    "DEFAULT_PRICES",
    "LOOKUP_ERROR_PRICE",
    "UNKNOWN_LEVEL_PRICE",
    "STARTER_CATALOG",
    "CatalogSeed",
    "PriceBand",
]
