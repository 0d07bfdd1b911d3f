# backend/inspector360/domain/validation.py
from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable, Optional

from .checklist import FOR_ATA_057_ITEMS, is_known_code, missing_applicable_codes
from .lifecycle import get_field

EQUIPMENT_CODE_RE = re.compile(r"^[A-Z]{3}-[A-Z]{2}-\d{3}$")

CHECKLIST_OUTCOMES: frozenset[str] = frozenset({"conforme", "no_conforme", "no_aplica"})
INSPECTION_TYPES: dict[str, str] = {
    "inicial": "Inicial",
    "periodica": "Periódica",
    "post_mantenimiento": "Post Mantenimiento",
}

MIN_EQUIPMENT_YEAR = 1900


def normalize_equipment_code(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()


def is_valid_equipment_code(code: Optional[str]) -> bool:
    """TLM-AR-001 style: three letters, two letters, three digits."""
    return bool(EQUIPMENT_CODE_RE.match(normalize_equipment_code(code)))


def checklist_entry_errors(item_code: str, entry: Any) -> list[str]:
    """
    Errors for one checklist entry. Empty list means valid.
    A null status is allowed (item not answered yet).
    """
    errors: list[str] = []
    if not is_known_code(item_code):
        errors.append(f"{item_code}: ítem desconocido")
        return errors

    if not isinstance(entry, dict):
        errors.append(f"{item_code}: formato inválido")
        return errors

    status = entry.get("status")
    if status is not None and status not in CHECKLIST_OUTCOMES:
        errors.append(f"{item_code}: estado inválido '{status}'")

    if status == "no_conforme":
        obs = entry.get("observations")
        if not isinstance(obs, str) or not obs.strip():
            errors.append(f"{item_code}: las observaciones son obligatorias para items no conformes")

    return errors


def checklist_errors(checklist_data: Optional[dict[str, Any]]) -> list[str]:
    errors: list[str] = []
    for code, entry in (checklist_data or {}).items():
        errors.extend(checklist_entry_errors(str(code).strip().upper(), entry))
    return errors


def general_data_errors(
    *,
    inspection_date: Optional[date],
    inspection_type: Optional[str],
    inspector_name: Optional[str],
    station: Optional[str],
    today: date,
) -> list[str]:
    errors: list[str] = []
    if inspection_date is None:
        errors.append("inspection_date: requerida")
    elif inspection_date > today:
        errors.append("inspection_date: la fecha no puede ser futura")
    if inspection_type not in INSPECTION_TYPES:
        errors.append("inspection_type: tipo de inspección requerido")
    if not (inspector_name or "").strip():
        errors.append("inspector_name: nombre del inspector requerido")
    if not (station or "").strip():
        errors.append("station: estación requerida")
    return errors


def is_valid_equipment_year(year: Optional[int], today: date) -> bool:
    if year is None:
        return True
    return MIN_EQUIPMENT_YEAR <= int(year) <= today.year + 1


def completion_errors(equipment_rows: Iterable[Any]) -> list[str]:
    """
    Each equipment row must answer every item applicable to it before the
    inspection can be signed off.
    """
    rows = list(equipment_rows or [])
    if not rows:
        return ["Debe agregar al menos un equipo"]

    errors: list[str] = []
    for eq in rows:
        code = get_field(eq, "code")
        # matched on the code only (TLM-EN-001), never the free-text type
        missing = missing_applicable_codes(code, get_field(eq, "checklist_data"), FOR_ATA_057_ITEMS)
        if missing:
            errors.append(f"{code}: checklist incompleto ({', '.join(missing)})")
    return errors


def next_observation_id(existing_ids: Iterable[Optional[str]]) -> str:
    """OBS-001, OBS-002, ... continuing after the highest number already used."""
    highest = 0
    for raw in existing_ids or []:
        m = re.match(r"^OBS-(\d+)$", (raw or "").strip().upper())
        if m:
            highest = max(highest, int(m.group(1)))
    return f"OBS-{highest + 1:03d}"
