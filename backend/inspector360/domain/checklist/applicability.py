# backend/inspector360/domain/checklist/applicability.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .template import FOR_ATA_057_ITEMS, ChecklistTemplateItem

MOTORIZED_PREFIXES: tuple[str, ...] = ("FT", "PM", "PE", "ASU", "TR", "AR", "EM")
MANUAL_PREFIXES: tuple[str, ...] = ("EN",)

# Bumper item applies to tractors, motorized stairs and manual stairs only.
BUMPER_PREFIXES: tuple[str, ...] = ("FT", "EM", "EN")


class EquipmentClass(str, Enum):
    MOTORIZED = "motorized"
    MANUAL = "manual"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class EquipmentProfile:
    equipment_class: EquipmentClass
    prefix: str  # matched type tag (FT, EN, ...) or "" when unknown


def _norm(text: Optional[str]) -> str:
    return (text or "").strip().upper()


def _class_of(tag: str) -> EquipmentClass:
    if tag in MANUAL_PREFIXES:
        return EquipmentClass.MANUAL
    if tag in MOTORIZED_PREFIXES:
        return EquipmentClass.MOTORIZED
    return EquipmentClass.UNKNOWN


def _type_segment(text: str) -> Optional[str]:
    """BB in AAA-BB-123, or the leading segment of a short code like FT-01."""
    parts = text.split("-")
    if len(parts) == 3 and parts[2].isdigit():
        return parts[1]
    if len(parts) == 2 and parts[1].isdigit():
        return parts[0]
    return None


def equipment_profile(text: Optional[str]) -> EquipmentProfile:
    """
    Single classification point for equipment codes and free-text types.

    Codes are classified on their type segment only, so TLM-FT-001 and FT-01 both
    resolve to FT. Anything else (an equipment type such as "Escalera EN") falls back
    to a substring search where manual wins over motorized.
    """
    t = _norm(text)
    segment = _type_segment(t)
    if segment is not None:
        eq_class = _class_of(segment)
        return EquipmentProfile(eq_class, segment if eq_class is not EquipmentClass.UNKNOWN else "")

    for tag in MANUAL_PREFIXES + MOTORIZED_PREFIXES:
        if tag in t:
            return EquipmentProfile(_class_of(tag), tag)
    return EquipmentProfile(EquipmentClass.UNKNOWN, "")


def classify_equipment(text: Optional[str]) -> EquipmentClass:
    return equipment_profile(text).equipment_class


def is_applicable(item_code: str, equipment: Optional[str]) -> bool:
    profile = equipment_profile(equipment)
    manual = profile.equipment_class is EquipmentClass.MANUAL
    code = _norm(item_code)

    if code == "CHK-05":  # fuel level
        return not manual

    if code == "CHK-13":  # bumpers
        return profile.prefix in BUMPER_PREFIXES

    if code == "CHK-14":  # stairs only
        return manual

    return not manual


def applicable_items(
    equipment: Optional[str],
    items: Iterable[ChecklistTemplateItem] = FOR_ATA_057_ITEMS,
) -> list[ChecklistTemplateItem]:
    return [it for it in items if is_applicable(it.code, equipment)]


def missing_applicable_codes(
    equipment: Optional[str],
    checklist_data: Optional[dict],
    items: Iterable[ChecklistTemplateItem] = FOR_ATA_057_ITEMS,
) -> list[str]:
    """Applicable item codes with no recorded status for this equipment."""
    data = checklist_data or {}
    out: list[str] = []
    for it in applicable_items(equipment, items):
        entry = data.get(it.code)
        status = entry.get("status") if isinstance(entry, dict) else None
        if not status:
            out.append(it.code)
    return out
