# backend/inspector360/domain/checklist/__init__.py
from .template import (
    CATEGORY_COUNTS,
    CHECKLIST_CATEGORIES,
    CHECKLIST_TEMPLATE,
    FOR_ATA_057_ITEMS,
    ChecklistTemplateItem,
    category_for_code,
    describe,
    get_item,
    grouped_by_category,
    is_known_code,
)
from .applicability import (
    MANUAL_PREFIXES,
    MOTORIZED_PREFIXES,
    EquipmentClass,
    applicable_items,
    classify_equipment,
    equipment_profile,
    is_applicable,
    missing_applicable_codes,
)

__all__ = [
    "CATEGORY_COUNTS",
    "CHECKLIST_CATEGORIES",
    "CHECKLIST_TEMPLATE",
    "FOR_ATA_057_ITEMS",
    "ChecklistTemplateItem",
    "category_for_code",
    "describe",
    "get_item",
    "grouped_by_category",
    "is_known_code",
    "MANUAL_PREFIXES",
    "MOTORIZED_PREFIXES",
    "EquipmentClass",
    "applicable_items",
    "classify_equipment",
    "equipment_profile",
    "is_applicable",
    "missing_applicable_codes",
]
