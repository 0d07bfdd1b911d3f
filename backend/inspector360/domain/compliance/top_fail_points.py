# backend/inspector360/domain/compliance/top_fail_points.py
from __future__ import annotations

import json
from collections import Counter
from typing import Any, Iterable, Iterator, Optional

from ..checklist import describe
from ..lifecycle import get_field

OUTCOMES: tuple[str, ...] = ("conforme", "no_conforme", "no_aplica")


def checklist_of(equipment_row: Any) -> dict[str, Any]:
    """
    checklist_data arrives in a few shapes depending on the source:
      1) dict {item_code: {"status": ..., "observacion": ...}}  (ORM JSON column)
      2) JSON string of the same                                 (raw exports)
      3) missing / null
    Returns a dict, never None.
    """
    raw = get_field(equipment_row, "checklist_data")
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def iter_outcomes(equipment_row: Any) -> Iterator[tuple[str, str]]:
    """(item_code, outcome) for every entry with a recognised outcome."""
    for code, entry in checklist_of(equipment_row).items():
        status = entry.get("status") if isinstance(entry, dict) else None
        if status in OUTCOMES:
            yield str(code).strip().upper(), status


def extract_fail_points(equipment_row: Any) -> list[str]:
    return [code for code, status in iter_outcomes(equipment_row) if status == "no_conforme"]


def top_issues(equipment_rows: Iterable[Any], limit: int = 10) -> list[dict[str, Any]]:
    """
    Most frequent non-conforming checklist items.
    Output shape: [{"code": "GEN-01", "description": "...", "count": 12}, ...]
    Ties are ordered by code.
    """
    ctr: Counter[str] = Counter()
    for row in equipment_rows or []:
        for code in extract_fail_points(row):
            ctr[code] += 1

    ranked = sorted(ctr.items(), key=lambda kv: (-kv[1], kv[0]))[: max(0, int(limit))]
    return [{"code": code, "description": describe(code), "count": count} for code, count in ranked]


def problematic_equipment(
    equipment_rows: Iterable[Any],
    limit: int = 10,
    station_of: Optional[dict[Any, str]] = None,
) -> list[dict[str, Any]]:
    """
    Equipment codes with the most non-conforming items across inspections.
    station_of maps inspection_id -> station code when the caller wants it shown.
    """
    counts: Counter[str] = Counter()
    inspections: dict[str, set] = {}
    stations: dict[str, set] = {}

    for row in equipment_rows or []:
        code = str(get_field(row, "code") or "").strip().upper()
        if not code:
            continue
        fails = len(extract_fail_points(row))
        if fails == 0:
            continue
        counts[code] += fails
        insp_id = get_field(row, "inspection_id")
        inspections.setdefault(code, set()).add(insp_id)
        if station_of and insp_id in station_of:
            stations.setdefault(code, set()).add(station_of[insp_id])

    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[: max(0, int(limit))]
    return [
        {
            "code": code,
            "issues": n,
            "inspections": len(inspections.get(code, ())),
            "stations": sorted(stations.get(code, ())),
        }
        for code, n in ranked
    ]
