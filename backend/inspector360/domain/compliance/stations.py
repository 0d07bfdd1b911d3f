# backend/inspector360/domain/compliance/stations.py
from __future__ import annotations

from datetime import date, tzinfo
from typing import Any, Iterable, Optional

from ..lifecycle import InspectionStatus, derive_status, get_field
from .daily import inspected_days
from .period import Period, in_period, is_completed, local_day, pct

PUNCTUALITY_WINDOW_DAYS = 2


def _code(v: Any) -> str:
    return str(v or "").strip().upper()


def is_punctual(inspection: Any, window_days: int = PUNCTUALITY_WINDOW_DAYS, tz: Optional[tzinfo] = None) -> bool:
    """Registered in the system no later than window_days after the inspection day."""
    done = local_day(get_field(inspection, "inspection_date"), tz)
    created = local_day(get_field(inspection, "created_at"), tz)
    if done is None or created is None:
        return False
    return (created - done).days <= window_days


def punctuality_rate(
    inspections: Iterable[Any],
    window_days: int = PUNCTUALITY_WINDOW_DAYS,
    tz: Optional[tzinfo] = None,
) -> int:
    rows = [i for i in inspections or [] if local_day(get_field(i, "inspection_date"), tz) is not None]
    punctual = sum(1 for i in rows if is_punctual(i, window_days, tz))
    return pct(punctual, len(rows))


def _group_by_station(inspections: Iterable[Any]) -> dict[str, list[Any]]:
    out: dict[str, list[Any]] = {}
    for insp in inspections or []:
        out.setdefault(_code(get_field(insp, "station")), []).append(insp)
    return out


def _master_codes_by_station(equipment_master: Iterable[Any]) -> dict[str, set[str]]:
    out: dict[str, set[str]] = {}
    for eq in equipment_master or []:
        if get_field(eq, "is_active", True) is False:
            continue
        out.setdefault(_code(get_field(eq, "station")), set()).add(_code(get_field(eq, "code")))
    return out


def station_compliance_status(
    inspections: Iterable[Any],
    stations: Iterable[Any],
    period: Period,
    *,
    today: date,
    equipment_master: Iterable[Any] = (),
    tz: Optional[tzinfo] = None,
    punctuality_window_days: int = PUNCTUALITY_WINDOW_DAYS,
) -> list[dict[str, Any]]:
    """
    One row per station, ranked by compliance_rate desc, then punctuality desc, then code.
    Stations with no inspections still appear with zeroed counters.
    """
    by_station = _group_by_station(in_period(inspections, period, tz))
    master = _master_codes_by_station(equipment_master)
    days_elapsed = period.elapsed_days(today)

    rows: list[dict[str, Any]] = []
    for st in stations or []:
        code = _code(get_field(st, "code"))
        if not code:
            continue

        insps = by_station.get(code, [])
        completed = [i for i in insps if is_completed(i)]
        days = {d for d in inspected_days(completed, period, tz) if d <= today}

        inspected_codes: set[str] = set()
        for insp in completed:
            for eq in get_field(insp, "equipment") or []:
                c = _code(get_field(eq, "code"))
                if c:
                    inspected_codes.add(c)

        station_master = master.get(code, set())
        pending = sum(1 for i in insps if derive_status(i) is InspectionStatus.PENDING)

        rows.append(
            {
                "code": code,
                "name": get_field(st, "name"),
                "count": len(completed),
                "days_with_inspection": len(days),
                "days_elapsed": days_elapsed,
                "compliance_rate": pct(len(days), days_elapsed),
                "punctuality_rate": punctuality_rate(completed, punctuality_window_days, tz),
                "equipment_count": len(inspected_codes),
                "equipment_total": len(station_master),
                "coverage_rate": pct(len(inspected_codes & station_master), len(station_master)),
                "pending_count": pending,
            }
        )

    rows.sort(key=lambda r: (-r["compliance_rate"], -r["punctuality_rate"], r["code"]))
    return rows


def station_daily_status(
    inspections: Iterable[Any],
    stations: Iterable[Any],
    period: Period,
    *,
    today: date,
    tz: Optional[tzinfo] = None,
) -> list[dict[str, Any]]:
    """
    Station x day grid: each cell is completed, missing, or future.
    """
    by_station = _group_by_station(inspections)

    out: list[dict[str, Any]] = []
    for st in stations or []:
        code = _code(get_field(st, "code"))
        if not code:
            continue
        seen = inspected_days(by_station.get(code, []), period, tz)
        days: list[dict[str, Any]] = []
        for d in period.days():
            if d > today:
                status = "future"
            elif d in seen:
                status = "completed"
            else:
                status = "missing"
            days.append({"date": d.isoformat(), "status": status})
        out.append({"code": code, "name": get_field(st, "name"), "days": days})
    return out
