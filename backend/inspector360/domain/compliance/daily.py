# backend/inspector360/domain/compliance/daily.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Any, Iterable, Optional

from .period import (
    Period,
    completed_in_period,
    inspection_day,
    is_completed,
    month_key,
    month_label,
    pct,
)

MAX_DAILY_BUCKET_DAYS = 62


@dataclass(frozen=True)
class DailyCompliance:
    start: date
    end: date
    days_in_period: int
    days_elapsed: int
    days_with_inspection: int
    compliance_rate: int
    period_rate: int
    breakdown: list[dict[str, Any]] = field(default_factory=list)

    @property
    def missed_days(self) -> int:
        return self.days_elapsed - self.days_with_inspection

    def as_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "days_in_period": self.days_in_period,
            "days_elapsed": self.days_elapsed,
            "days_with_inspection": self.days_with_inspection,
            "missed_days": self.missed_days,
            "compliance_rate": self.compliance_rate,
            "period_rate": self.period_rate,
            "breakdown": self.breakdown,
        }


def inspected_days(inspections: Iterable[Any], period: Period, tz: Optional[tzinfo] = None) -> set[date]:
    """Distinct station-local days in the period with at least one completed inspection."""
    out: set[date] = set()
    for insp in completed_in_period(inspections, period, tz):
        d = inspection_day(insp, tz)
        if d is not None:
            out.add(d)
    return out


def daily_compliance(
    inspections: Iterable[Any],
    period: Period,
    *,
    today: date,
    tz: Optional[tzinfo] = None,
) -> DailyCompliance:
    """
    One point per calendar day of the period.

    Days after `today` are reported with has_inspection=False and cumulative=None,
    and they never enter the rate. compliance_rate divides by the days elapsed so far;
    period_rate divides by every day of the period (equal once the period is over).
    """
    seen = inspected_days(inspections, period, tz)

    breakdown: list[dict[str, Any]] = []
    running = 0
    for idx, d in enumerate(period.days(), start=1):
        future = d > today
        has = (d in seen) and not future
        if has:
            running += 1
        breakdown.append(
            {
                "date": d.isoformat(),
                "day": d.day,
                "value": 1 if has else 0,
                "has_inspection": has,
                "is_future": future,
                "target": idx,
                "cumulative": None if future else running,
            }
        )

    days_elapsed = period.elapsed_days(today)
    return DailyCompliance(
        start=period.start,
        end=period.end,
        days_in_period=period.days_in_period,
        days_elapsed=days_elapsed,
        days_with_inspection=running,
        compliance_rate=pct(running, days_elapsed),
        period_rate=pct(running, period.days_in_period),
        breakdown=breakdown,
    )


def trend_series(
    inspections: Iterable[Any],
    period: Period,
    *,
    tz: Optional[tzinfo] = None,
    max_daily_days: int = MAX_DAILY_BUCKET_DAYS,
) -> dict[str, Any]:
    """
    Completed inspections per bucket across the period, empty buckets included.
    Daily buckets up to max_daily_days, monthly buckets for longer ranges.
    """
    monthly = period.days_in_period > max_daily_days

    buckets: dict[str, dict[str, Any]] = {}
    for d in period.days():
        key = month_key(d) if monthly else d.isoformat()
        if key not in buckets:
            buckets[key] = {"key": key, "label": month_label(d) if monthly else key, "count": 0}

    for insp in completed_in_period(inspections, period, tz):
        d = inspection_day(insp, tz)
        key = month_key(d) if monthly else d.isoformat()
        buckets[key]["count"] += 1

    return {"granularity": "month" if monthly else "day", "points": list(buckets.values())}


def monthly_trends(inspections: Iterable[Any], tz: Optional[tzinfo] = None) -> list[dict[str, Any]]:
    """Completed inspections per calendar month, oldest first. Months without inspections are skipped."""
    counts: dict[str, dict[str, Any]] = {}
    for insp in inspections or []:
        if not is_completed(insp):
            continue
        d = inspection_day(insp, tz)
        if d is None:
            continue
        key = month_key(d)
        bucket = counts.setdefault(key, {"month": key, "label": month_label(d), "inspections": 0})
        bucket["inspections"] += 1
    return [counts[k] for k in sorted(counts)]
