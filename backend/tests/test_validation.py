# backend/tests/test_validation.py
from __future__ import annotations

from datetime import date

from inspector360.domain.validation import (
    checklist_entry_errors,
    checklist_errors,
    completion_errors,
    general_data_errors,
    is_valid_equipment_code,
    is_valid_equipment_year,
    next_observation_id,
)


def test_equipment_code_format():
    assert is_valid_equipment_code("TLM-AR-001")
    assert is_valid_equipment_code(" tlm-ar-001 ")
    assert not is_valid_equipment_code("TLM-AR-01")
    assert not is_valid_equipment_code("TLMX-AR-001")
    assert not is_valid_equipment_code("")
    assert not is_valid_equipment_code(None)


def test_no_conforme_needs_observations():
    assert len(checklist_entry_errors("CHK-01", {"status": "no_conforme", "observations": "  "})) == 1
    assert checklist_entry_errors("CHK-01", {"status": "no_conforme", "observations": "Vencido"}) == []


def test_checklist_entry_rules():
    assert checklist_entry_errors("CHK-01", {"status": None}) == []
    assert checklist_entry_errors("CHK-01", {"status": "bad"}) == ["CHK-01: estado inválido 'bad'"]
    assert checklist_entry_errors("XXX-01", {"status": "conforme"}) == ["XXX-01: ítem desconocido"]
    assert checklist_entry_errors("CHK-01", "conforme") == ["CHK-01: formato inválido"]


def test_checklist_errors_normalizes_codes():
    assert checklist_errors({"chk-02": {"status": "conforme"}}) == []
    assert checklist_errors(None) == []


def test_general_data_errors():
    today = date(2024, 5, 10)
    ok = general_data_errors(
        inspection_date=today, inspection_type="periodica", inspector_name="Juan", station="AQP", today=today
    )
    assert ok == []

    errors = general_data_errors(
        inspection_date=date(2024, 5, 11), inspection_type="semanal", inspector_name=" ", station=None, today=today
    )
    assert len(errors) == 4
    assert errors[0] == "inspection_date: la fecha no puede ser futura"


def test_equipment_year_range():
    today = date(2024, 5, 10)
    assert is_valid_equipment_year(None, today)
    assert is_valid_equipment_year(1900, today)
    assert is_valid_equipment_year(2025, today)
    assert not is_valid_equipment_year(1899, today)
    assert not is_valid_equipment_year(2026, today)


def test_completion_requires_equipment_and_full_checklist():
    assert completion_errors([]) == ["Debe agregar al menos un equipo"]

    partial = {"code": "TLM-EN-001", "checklist_data": {"CHK-13": {"status": "conforme"}}}
    assert completion_errors([partial]) == ["TLM-EN-001: checklist incompleto (CHK-14)"]

    partial["checklist_data"]["CHK-14"] = {"status": "no_conforme", "observations": "Peldaño flojo"}
    assert completion_errors([partial]) == []


def test_next_observation_id():
    assert next_observation_id([]) == "OBS-001"
    assert next_observation_id(["OBS-001", "obs-007", None, "x"]) == "OBS-008"
