# backend/inspector360/domain/compliance/compliance_stats.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any, Iterable, Optional

from ..checklist import category_for_code
from ..lifecycle import get_field
from .period import current_month_period, in_period, is_completed, pct
from .top_fail_points import iter_outcomes, top_issues


@dataclass(frozen=True)
class OutcomeBreakdown:
    conforme: int
    no_conforme: int
    no_aplica: int
    by_category: dict[str, dict[str, int]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.conforme + self.no_conforme + self.no_aplica

    @property
    def conformity_rate(self) -> int:
        # share of conforme over every recorded entry, no_aplica included
        return pct(self.conforme, self.total)

    def as_dict(self) -> dict[str, Any]:
        return {
            "conforme": self.conforme,
            "no_conforme": self.no_conforme,
            "no_aplica": self.no_aplica,
            "total": self.total,
            "conformity_rate": self.conformity_rate,
            "by_category": self.by_category,
        }


def equipment_of(inspections: Iterable[Any]) -> list[Any]:
    rows: list[Any] = []
    for insp in inspections or []:
        rows.extend(get_field(insp, "equipment") or [])
    return rows


def outcome_breakdown(equipment_rows: Iterable[Any]) -> OutcomeBreakdown:
    totals = {"conforme": 0, "no_conforme": 0, "no_aplica": 0}
    by_category: dict[str, dict[str, int]] = {}

    for row in equipment_rows or []:
        for code, status in iter_outcomes(row):
            totals[status] += 1
            bucket = by_category.setdefault(
                category_for_code(code), {"conforme": 0, "no_conforme": 0, "no_aplica": 0}
            )
            bucket[status] += 1

    return OutcomeBreakdown(
        conforme=totals["conforme"],
        no_conforme=totals["no_conforme"],
        no_aplica=totals["no_aplica"],
        by_category=by_category,
    )


def overall_stats(
    inspections: Iterable[Any],
    *,
    today: date,
    tz: Optional[tzinfo] = None,
    top_limit: int = 10,
) -> dict[str, Any]:
    """
    Header card rollup for the dashboard.

    Works with Inspection ORM rows (equipment loaded) or dicts of the same shape:
      {"status": "...", "inspection_date": ..., "equipment": [{"checklist_data": {...}}]}
    """
    inspections = list(inspections or [])
    completed = [i for i in inspections if is_completed(i)]
    this_month = in_period(completed, current_month_period(today), tz)

    rows = equipment_of(completed)
    breakdown = outcome_breakdown(rows)

    return {
        "total_inspections": len(inspections),
        "completed_inspections": len(completed),
        "completed_this_month": len(this_month),
        "equipment_inspected": len(rows),
        "conformity_rate": breakdown.conformity_rate,
        "outcomes": breakdown.as_dict(),
        "top_issues": top_issues(rows, limit=top_limit),
    }
