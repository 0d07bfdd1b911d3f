# backend/inspector360/domain/compliance/en_tracking.py
from __future__ import annotations

from datetime import date, tzinfo
from typing import Any, Iterable, Optional

from ..lifecycle import get_field
from .period import Period, completed_in_period, inspection_day, pct

EN_MARKER = "EN"


def _code(v: Any) -> str:
    return str(v or "").strip().upper()


def is_en_code(code: Any) -> bool:
    return EN_MARKER in _code(code)


def stations_with_en(equipment_master: Iterable[Any], station: Optional[str] = None) -> list[str]:
    out: set[str] = set()
    for eq in equipment_master or []:
        if get_field(eq, "is_active", True) is False:
            continue
        if not is_en_code(get_field(eq, "code")):
            continue
        st = _code(get_field(eq, "station"))
        if st and (station is None or st == _code(station)):
            out.add(st)
    return sorted(out)


def en_equipment_heatmap(
    equipment_master: Iterable[Any],
    inspections: Iterable[Any],
    period: Period,
    *,
    station: Optional[str] = None,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> list[dict[str, Any]]:
    """
    Manual stairs (EN) tracking grid, one row per station that owns EN equipment.

    A day is inspected when any completed inspection that day lists an EN code.
    has_observations marks an observation raised against an EN code that day.
    Days after `today` are flagged future.
    """
    st_codes = stations_with_en(equipment_master, station)

    # (station, day) -> {"inspected": bool, "has_observations": bool}
    cells: dict[tuple[str, date], dict[str, bool]] = {}
    for insp in completed_in_period(inspections, period, tz):
        d = inspection_day(insp, tz)
        st = _code(get_field(insp, "station"))
        if d is None or st not in st_codes:
            continue
        has_en = any(is_en_code(get_field(eq, "code")) for eq in get_field(insp, "equipment") or [])
        has_obs = any(is_en_code(get_field(o, "equipment_code")) for o in get_field(insp, "observations") or [])
        cell = cells.setdefault((st, d), {"inspected": False, "has_observations": False})
        cell["inspected"] = cell["inspected"] or has_en
        cell["has_observations"] = cell["has_observations"] or (has_en and has_obs)

    grid: list[dict[str, Any]] = []
    for st in st_codes:
        days: list[dict[str, Any]] = []
        for d in period.days():
            cell = cells.get((st, d), {"inspected": False, "has_observations": False})
            days.append(
                {
                    "date": d.isoformat(),
                    "inspected": cell["inspected"],
                    "has_observations": cell["has_observations"],
                    "is_future": today is not None and d > today,
                }
            )
        grid.append({"station": st, "days": days})
    return grid


def en_equipment_stats(grid: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Rollup of a heatmap grid; future days are left out of every count."""
    grid = list(grid or [])
    possible = 0
    inspected = 0
    with_obs = 0
    for row in grid:
        for day in row.get("days") or []:
            if day.get("is_future"):
                continue
            possible += 1
            if day.get("inspected"):
                inspected += 1
                if day.get("has_observations"):
                    with_obs += 1

    return {
        "total_stations": len(grid),
        "total_days": len(grid[0].get("days") or []) if grid else 0,
        "total_possible": possible,
        "total_inspected": inspected,
        "total_with_observations": with_obs,
        "compliance_rate": pct(inspected, possible),
        "observation_rate": pct(with_obs, inspected),
    }
