from __future__ import annotations

from datetime import date
from typing import Callable, Sequence

from .models.module import PricedModule

UNTITLED_PROJECT = "Untitled Project"

_RULE = "=" * 80
_THIN_RULE = "-" * 80


def derive_title(summary: str | None) -> str:
    """Project title is the summary up to its first period."""
    title = (summary or "").split(".", 1)[0].strip()
    return title or UNTITLED_PROJECT


def format_quotation_date(day: date) -> str:
    return f"{day.day} {day:%B %Y}"


class QuotationAssembler:
    """Renders the plain-text quotation handed back with every successful analysis."""

    def __init__(self, *, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def render(
        self,
        *,
        project_title: str,
        modules: Sequence[PricedModule],
        total: float,
        summary: str,
        is_student: bool,
        quotation_date: date | None = None,
    ) -> str:
        client_type = "STUDENT" if is_student else "REGULAR"
        module_lines = "\n".join(
            f"{index}. {module.name:<30} | {module.level:<8} | RM {module.price:.2f}"
            for index, module in enumerate(modules, start=1)
        )
        notes = ["- All prices are in Malaysian Ringgit (MYR)"]
        if is_student:
            notes.append("- Student discount has been applied")
        notes.extend(
            [
                "- Prices are estimates based on standard complexity levels",
                "- Final pricing may vary based on specific requirements",
                "- This quotation is valid for 30 days from the date above",
                "- Payment terms: 50% upfront, 50% on completion",
            ]
        )

        lines = [
            _RULE,
            "PROJECT QUOTATION".center(80).rstrip(),
            _RULE,
            "",
            f"Quotation Date: {format_quotation_date(quotation_date or self._today())}",
            f"Project Title:  {project_title}",
            f"Client Type:    {client_type}",
            "",
            _THIN_RULE,
            "PROJECT SUMMARY".center(80).rstrip(),
            _THIN_RULE,
            summary,
            "",
            _THIN_RULE,
            "MODULE BREAKDOWN".center(80).rstrip(),
            _THIN_RULE,
            f"#   {'Module Name':<30} | {'Level':<8} | Price (MYR)",
            _THIN_RULE,
            module_lines,
            _THIN_RULE,
            f"TOTAL: RM {total:.2f}".rjust(80),
            _RULE,
            "",
            "NOTES:",
            *notes,
            "",
            _RULE,
            "Thank you for your business!".center(80).rstrip(),
            _RULE,
        ]
        return "\n".join(lines)


__all__ = ["QuotationAssembler", "derive_title", "format_quotation_date", "UNTITLED_PROJECT"]
