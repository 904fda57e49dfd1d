from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import Engine, delete, func, insert, select, update
from sqlalchemy.engine import RowMapping

from .catalog_defaults import STARTER_CATALOG, CatalogSeed
from .database import pricing_dataset
from .models.catalog import PriceCatalogEntry, PriceCatalogInput

logger = logging.getLogger(__name__)


class PriceCatalogStore:
    """SQL-backed price catalog keyed by (module name, complexity level)."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def find_exact(self, module_name: str, complexity_level: str) -> PriceCatalogEntry | None:
        """Case-insensitive name match at the given level."""
        query = (
            select(pricing_dataset)
            .where(func.lower(pricing_dataset.c.module_name) == module_name.strip().lower())
            .where(pricing_dataset.c.complexity_level == complexity_level)
            .order_by(pricing_dataset.c.id)
            .limit(1)
        )
        return self._first(query)

    def find_partial(self, module_name: str, complexity_level: str) -> PriceCatalogEntry | None:
        """Case-insensitive substring match in either direction at the given level.

        Entries whose name contains ``module_name`` win over entries whose name
        is contained in it.
        """
        needle = module_name.strip().lower()
        if not needle:
            return None
        lowered = func.lower(pricing_dataset.c.module_name)
        base = (
            select(pricing_dataset)
            .where(pricing_dataset.c.complexity_level == complexity_level)
            .order_by(pricing_dataset.c.id)
            .limit(1)
        )
        entry = self._first(base.where(lowered.contains(needle, autoescape=True)))
        if entry is not None:
            return entry

        # Reverse direction is a plain substring test; catalog names may hold LIKE wildcards.
        query = (
            select(pricing_dataset)
            .where(pricing_dataset.c.complexity_level == complexity_level)
            .order_by(pricing_dataset.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        for row in rows:
            name = (row["module_name"] or "").strip().lower()
            if name and name in needle:
                return self._to_entry(row)
        return None

    def list_entries(self) -> list[PriceCatalogEntry]:
        query = select(pricing_dataset).order_by(
            pricing_dataset.c.module_name, pricing_dataset.c.complexity_level
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [self._to_entry(row) for row in rows]

    def get_entry(self, entry_id: int) -> PriceCatalogEntry | None:
        return self._first(select(pricing_dataset).where(pricing_dataset.c.id == entry_id))

    def add_entry(self, data: PriceCatalogInput) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(insert(pricing_dataset).values(**self._to_row(data)))
            entry_id = result.inserted_primary_key[0]
        logger.info(
            "Added pricing entry",
            extra={"entry_id": entry_id, "module_name": data.module_name},
        )
        return entry_id

    def update_entry(self, entry_id: int, data: PriceCatalogInput) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(pricing_dataset)
                .where(pricing_dataset.c.id == entry_id)
                .values(**self._to_row(data))
            )
        return result.rowcount > 0

    def delete_entry(self, entry_id: int) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(delete(pricing_dataset).where(pricing_dataset.c.id == entry_id))
        return result.rowcount > 0

    def seed(self, entries: Iterable[CatalogSeed] = STARTER_CATALOG) -> int:
        """Insert ``entries`` when the catalog is empty; returns rows inserted."""
        rows = [
            {
                "module_name": seed.module_name,
                "complexity_level": seed.complexity_level.value,
                "base_price": seed.base_price,
                "student_price": seed.student_price,
                "description": seed.description,
            }
            for seed in entries
        ]
        with self._engine.begin() as conn:
            existing = conn.execute(select(func.count()).select_from(pricing_dataset)).scalar_one()
            if existing or not rows:
                return 0
            conn.execute(insert(pricing_dataset), rows)
        logger.info("Seeded price catalog", extra={"rows": len(rows)})
        return len(rows)

    def _first(self, query) -> PriceCatalogEntry | None:
        with self._engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        return self._to_entry(row) if row else None

    def _to_row(self, data: PriceCatalogInput) -> dict:
        return {
            "module_name": data.module_name,
            "complexity_level": data.complexity_level.value,
            "base_price": data.base_price,
            "student_price": data.student_price,
            "description": data.description,
        }

    def _to_entry(self, row: RowMapping) -> PriceCatalogEntry:
        return PriceCatalogEntry(
            id=row["id"],
            module_name=row["module_name"],
            complexity_level=row["complexity_level"],
            base_price=row["base_price"],
            student_price=row["student_price"],
            description=row["description"],
        )


__all__ = ["PriceCatalogStore"]
