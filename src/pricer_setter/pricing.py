from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from .catalog_defaults import DEFAULT_PRICES, LOOKUP_ERROR_PRICE, UNKNOWN_LEVEL_PRICE, PriceBand
from .models.catalog import PriceCatalogEntry
from .models.module import ComplexityLevel, ModuleClassification, PricedModule

logger = logging.getLogger(__name__)


class PriceCatalog(Protocol):
    def find_exact(self, module_name: str, complexity_level: str) -> PriceCatalogEntry | None:
        ...

    def find_partial(self, module_name: str, complexity_level: str) -> PriceCatalogEntry | None:
        ...


@dataclass
class PricedProject:
    modules: list[PricedModule]
    total: float


class PricingResolver:
    """Maps classified modules to prices: exact match, then partial, then defaults.

    Resolution never raises. A failing catalog lookup is logged and priced at
    the lookup-error fallback so a quotation can always be produced.
    """

    def __init__(
        self,
        catalog: PriceCatalog,
        *,
        default_prices: Mapping[ComplexityLevel, PriceBand] = DEFAULT_PRICES,
        unknown_level_price: PriceBand = UNKNOWN_LEVEL_PRICE,
        lookup_error_price: PriceBand = LOOKUP_ERROR_PRICE,
    ) -> None:
        self._catalog = catalog
        self._default_prices = dict(default_prices)
        self._unknown_level_price = unknown_level_price
        self._lookup_error_price = lookup_error_price

    def resolve(self, module_name: str, complexity_level: str, is_student: bool = False) -> float:
        try:
            entry = self._catalog.find_exact(module_name, complexity_level)
            if entry is None:
                entry = self._catalog.find_partial(module_name, complexity_level)
        except Exception:
            logger.error(
                "Pricing lookup failed",
                exc_info=True,
                extra={"module_name": module_name, "complexity_level": complexity_level},
            )
            return self._lookup_error_price.pick(is_student=is_student)

        if entry is not None:
            return float(entry.price_for(is_student=is_student))

        band = self._default_band(complexity_level)
        logger.debug(
            "No catalog entry, using default price",
            extra={"module_name": module_name, "complexity_level": complexity_level},
        )
        return band.pick(is_student=is_student)

    def price_modules(
        self,
        modules: Sequence[ModuleClassification],
        is_student: bool = False,
    ) -> PricedProject:
        priced: list[PricedModule] = []
        for module in modules:
            price = self.resolve(module.name, module.level, is_student)
            priced.append(
                PricedModule(
                    name=module.name,
                    level=module.level,
                    description=module.description or "",
                    price=price,
                )
            )
        return PricedProject(modules=priced, total=sum(module.price for module in priced))

    def _default_band(self, complexity_level: str) -> PriceBand:
        try:
            level = ComplexityLevel(complexity_level)
        except ValueError:
            return self._unknown_level_price
        return self._default_prices.get(level, self._unknown_level_price)


__all__ = ["PricingResolver", "PricedProject", "PriceCatalog"]
