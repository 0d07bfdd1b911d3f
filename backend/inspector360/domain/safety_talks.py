# backend/inspector360/domain/safety_talks.py
from __future__ import annotations

from typing import Any, Iterable, Optional

from .lifecycle import get_field

# Lower = higher in the hierarchy. First keyword found in the position wins.
POSITION_PRIORITY: tuple[tuple[str, int], ...] = (
    ("jefe", 1),
    ("gerente", 1),
    ("superintendente", 1),
    ("coordinator", 2),
    ("coordinador", 2),
    ("supervisor", 2),
    ("lider", 3),
    ("lead", 3),
    ("inspector", 4),
    ("asistente", 5),
    ("assistant", 5),
    ("practicante", 9),
    ("intern", 9),
)

DEFAULT_PRIORITY = 6
NO_POSITION_PRIORITY = 10


def position_priority(position: Optional[str]) -> int:
    if not position or not position.strip():
        return NO_POSITION_PRIORITY
    p = position.lower()
    for key, prio in POSITION_PRIORITY:
        if key in p:
            return prio
    return DEFAULT_PRIORITY


def sort_employees_by_hierarchy(employees: Iterable[Any]) -> list[Any]:
    return sorted(
        employees or [],
        key=lambda e: (
            position_priority(get_field(e, "position")),
            (get_field(e, "full_name") or "").casefold(),
        ),
    )


def suggest_talk(candidates: Iterable[Any], executed_schedule_ids: Iterable[Any]) -> Optional[Any]:
    """
    candidates: today's schedules for the station plus global ones (station_code is None).
    Mandatory talks come first; the first schedule not yet executed by the station wins.
    """
    done = set(executed_schedule_ids or [])
    ordered = sorted(
        candidates or [],
        key=lambda s: (0 if get_field(s, "is_mandatory") else 1, get_field(s, "id") or 0),
    )
    for sched in ordered:
        if get_field(sched, "id") not in done:
            return sched
    return None


def schedules_for_station(schedules: Iterable[Any], station_code: str) -> list[Any]:
    code = (station_code or "").strip().upper()
    out: list[Any] = []
    for s in schedules or []:
        st = get_field(s, "station_code")
        if st is None or str(st).strip().upper() == code:
            out.append(s)
    return out
