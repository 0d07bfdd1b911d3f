# backend/tests/test_checklist_applicability.py
from __future__ import annotations

from inspector360.domain.checklist import (
    CATEGORY_COUNTS,
    CHECKLIST_TEMPLATE,
    FOR_ATA_057_ITEMS,
    EquipmentClass,
    applicable_items,
    category_for_code,
    classify_equipment,
    describe,
    equipment_profile,
    is_applicable,
    missing_applicable_codes,
)


def _codes(items):
    return [it.code for it in items]


def test_template_has_fifty_items_in_five_categories():
    assert len(CHECKLIST_TEMPLATE) == 50
    for category, n in CATEGORY_COUNTS.items():
        assert len([it for it in CHECKLIST_TEMPLATE if it.category == category]) == n
    assert [it.order_index for it in CHECKLIST_TEMPLATE] == list(range(1, 51))


def test_field_form_items_are_chk_01_to_14():
    assert _codes(FOR_ATA_057_ITEMS) == [f"CHK-{i:02d}" for i in range(1, 15)]


def test_describe_falls_back_to_raw_code():
    assert describe("CHK-02").startswith("Pin de seguridad")
    assert describe("ZZZ-99") == "ZZZ-99"


def test_category_for_code_uses_prefix():
    assert category_for_code("DOC-03") == "documentacion"
    assert category_for_code("hid-01") == "hidraulico"
    assert category_for_code("CHK-01") == "general"


def test_classify_equipment():
    assert classify_equipment("TLM-EN-001") is EquipmentClass.MANUAL
    assert classify_equipment("tlm-ft-001") is EquipmentClass.MOTORIZED
    assert classify_equipment("TLM-XX-001") is EquipmentClass.UNKNOWN
    assert classify_equipment(None) is EquipmentClass.UNKNOWN
    # manual wins when both markers appear
    assert classify_equipment("EN FT") is EquipmentClass.MANUAL


def test_equipment_profile_reads_type_segment():
    assert equipment_profile("FT-001").prefix == "FT"
    assert equipment_profile("EN-002").equipment_class is EquipmentClass.MANUAL
    assert equipment_profile("TLM-FT-001") == equipment_profile("FT-01")
    assert equipment_profile("TLM-XX-001").prefix == ""


def test_station_prefix_does_not_change_the_class():
    # PEM contains EM, the type segment is TR
    assert equipment_profile("PEM-TR-001").prefix == "TR"
    assert classify_equipment("PEM-TR-001") is EquipmentClass.MOTORIZED
    assert is_applicable("CHK-13", "PEM-TR-001") is False
    assert classify_equipment("ENA-FT-001") is EquipmentClass.MOTORIZED
    assert is_applicable("CHK-05", "ENA-FT-001") is True


def test_fuel_level_not_for_manual_stairs():
    assert is_applicable("CHK-05", "TLM-EN-001") is False
    assert is_applicable("CHK-05", "TLM-FT-001") is True


def test_bumpers_only_for_tractors_and_stairs():
    assert is_applicable("CHK-13", "TLM-FT-001") is True
    assert is_applicable("CHK-13", "TLM-EM-001") is True
    assert is_applicable("CHK-13", "TLM-EN-001") is True
    assert is_applicable("CHK-13", "TLM-PM-001") is False


def test_stairs_item_only_for_manual():
    assert is_applicable("CHK-14", "TLM-EN-001") is True
    assert is_applicable("CHK-14", "TLM-FT-001") is False


def test_unknown_equipment_gets_general_items():
    assert is_applicable("CHK-01", "TLM-XX-001") is True
    assert is_applicable("CHK-01", "TLM-EN-001") is False


def test_applicable_items_per_class():
    assert _codes(applicable_items("TLM-EN-001")) == ["CHK-13", "CHK-14"]
    assert _codes(applicable_items("TLM-FT-001")) == [f"CHK-{i:02d}" for i in range(1, 14)]
    assert _codes(applicable_items("TLM-PM-001")) == [f"CHK-{i:02d}" for i in range(1, 13)]


def test_missing_applicable_codes_ignores_null_status():
    data = {"CHK-13": {"status": "conforme"}, "CHK-14": {"status": None}}
    assert missing_applicable_codes("TLM-EN-001", data) == ["CHK-14"]
    data["CHK-14"] = {"status": "no_aplica"}
    assert missing_applicable_codes("TLM-EN-001", data) == []
    assert missing_applicable_codes("TLM-EN-001", None) == ["CHK-13", "CHK-14"]


def test_general_items_follow_equipment_class():
    for it in FOR_ATA_057_ITEMS + CHECKLIST_TEMPLATE:
        if it.code in ("CHK-05", "CHK-13", "CHK-14"):
            continue
        assert is_applicable(it.code, "EN-01") is False, it.code
        assert is_applicable(it.code, "FT-01") is True, it.code


def test_short_codes():
    assert is_applicable("CHK-13", "TR-01") is False
    assert is_applicable("CHK-13", "EM-02") is True
    assert is_applicable("CHK-13", "EN-05") is True
    assert is_applicable("CHK-14", "FT-01") is False
    assert is_applicable("CHK-14", "EN-01") is True


def test_field_form_wording():
    assert describe("CHK-07") == (
        "Circulina operativa: encender y comprobar visibilidad. (Aplica a todos los equipos). "
        "Alarma de retroceso operativo (Aplica a FT-PM-TR)"
    )
    assert describe("CHK-13").endswith("(Aplica a FT-EM)")
