from __future__ import annotations

import json
import logging
from typing import Sequence

from pydantic import TypeAdapter
from sqlalchemy import Engine, insert, select, update
from sqlalchemy.engine import RowMapping

from .database import project_patterns, quotations
from .models.module import PricedModule
from .models.quotation import (
    PatternCreate,
    ProjectPatternRecord,
    QuotationCreate,
    QuotationRecord,
    QuotationStatus,
)

logger = logging.getLogger(__name__)

_modules_adapter = TypeAdapter(list[PricedModule])


def _dump_modules(modules: Sequence[PricedModule]) -> str:
    return json.dumps([module.model_dump() for module in modules])


def _load_modules(raw: str | None) -> list[PricedModule]:
    return _modules_adapter.validate_json(raw or "[]")


class ProjectStore:
    """Persists saved quotations and the project patterns used for similarity checks."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save_quotation(self, data: QuotationCreate) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(quotations).values(
                    project_title=data.project_title,
                    modules_json=_dump_modules(data.modules),
                    total_price=data.total,
                    quotation_text=data.quotation_text,
                    is_student=data.is_student,
                    status=QuotationStatus.draft.value,
                )
            )
            quotation_id = result.inserted_primary_key[0]
        logger.info(
            "Saved quotation",
            extra={"quotation_id": quotation_id, "total_price": data.total},
        )
        return quotation_id

    def list_quotations(self) -> list[QuotationRecord]:
        query = select(quotations).order_by(quotations.c.created_at.desc(), quotations.c.id.desc())
        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [self._to_quotation(row) for row in rows]

    def get_quotation(self, quotation_id: int) -> QuotationRecord | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(quotations).where(quotations.c.id == quotation_id)
            ).mappings().first()
        return self._to_quotation(row) if row else None

    def update_quotation_status(self, quotation_id: int, status: str) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(quotations)
                .where(quotations.c.id == quotation_id)
                .values(status=status)
            )
        updated = result.rowcount > 0
        logger.info(
            "Updated quotation status",
            extra={"quotation_id": quotation_id, "status": status, "updated": updated},
        )
        return updated

    def save_pattern(self, data: PatternCreate) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                insert(project_patterns).values(
                    project_title=data.project_title,
                    project_description=data.description,
                    modules_json=_dump_modules(data.modules),
                    total_price=data.total_price,
                    keywords=",".join(data.keywords),
                    is_student=data.is_student,
                )
            )
            pattern_id = result.inserted_primary_key[0]
        logger.info("Saved project pattern", extra={"pattern_id": pattern_id})
        return pattern_id

    def list_patterns(self) -> list[ProjectPatternRecord]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(project_patterns).order_by(project_patterns.c.id)).mappings().all()
        return [self._to_pattern(row) for row in rows]

    def _to_quotation(self, row: RowMapping) -> QuotationRecord:
        return QuotationRecord(
            id=row["id"],
            project_title=row["project_title"],
            modules=_load_modules(row["modules_json"]),
            total_price=row["total_price"],
            quotation_text=row["quotation_text"] or "",
            is_student=bool(row["is_student"]),
            status=row["status"],
            created_at=row["created_at"],
        )

    def _to_pattern(self, row: RowMapping) -> ProjectPatternRecord:
        keywords = [item.strip() for item in (row["keywords"] or "").split(",") if item.strip()]
        return ProjectPatternRecord(
            id=row["id"],
            project_title=row["project_title"],
            description=row["project_description"] or "",
            modules=_load_modules(row["modules_json"]),
            total_price=row["total_price"],
            keywords=keywords,
            is_student=bool(row["is_student"]),
            created_at=row["created_at"],
        )


__all__ = ["ProjectStore"]
