# backend/tests/test_compliance_stats.py
from __future__ import annotations

from datetime import date

from inspector360.domain.compliance import (
    outcome_breakdown,
    overall_stats,
    problematic_equipment,
    top_issues,
)
from inspector360.domain.compliance.top_fail_points import checklist_of


def _rows():
    return [
        {
            "code": "TLM-FT-001",
            "inspection_id": 1,
            "checklist_data": {
                "CHK-01": {"status": "conforme"},
                "CHK-02": {"status": "no_conforme", "observations": "Pin doblado"},
                "CHK-03": {"status": "no_aplica"},
                "CHK-04": {"status": None},
                "DOC-01": {"status": "conforme"},
            },
        },
        {
            "code": "TLM-EN-001",
            "inspection_id": 2,
            # raw exports carry the checklist as a JSON string
            "checklist_data": '{"CHK-02": {"status": "no_conforme"}, "GEN-01": {"status": "no_conforme"},'
            ' "ZZZ-99": {"status": "no_conforme"}}',
        },
        {"code": "TLM-PM-001", "inspection_id": 2, "checklist_data": None},
    ]


def test_checklist_of_handles_every_shape():
    assert checklist_of({"checklist_data": {"A": {}}}) == {"A": {}}
    assert checklist_of({"checklist_data": '{"A": {}}'}) == {"A": {}}
    assert checklist_of({"checklist_data": "{broken"}) == {}
    assert checklist_of({"checklist_data": "[1, 2]"}) == {}
    assert checklist_of({}) == {}


def test_outcome_breakdown_counts_every_recorded_entry():
    b = outcome_breakdown(_rows())
    assert (b.conforme, b.no_conforme, b.no_aplica, b.total) == (2, 4, 1, 7)
    assert b.conformity_rate == 29
    assert b.by_category["documentacion"] == {"conforme": 1, "no_conforme": 0, "no_aplica": 0}
    assert b.by_category["general"]["no_conforme"] == 4


def test_outcome_breakdown_empty():
    b = outcome_breakdown([])
    assert b.total == 0
    assert b.conformity_rate == 0


def test_top_issues_ranked_with_code_tiebreak():
    out = top_issues(_rows())
    assert [(r["code"], r["count"]) for r in out] == [("CHK-02", 2), ("GEN-01", 1), ("ZZZ-99", 1)]
    assert out[0]["description"].startswith("Pin de seguridad")
    assert out[2]["description"] == "ZZZ-99"


def test_top_issues_limit():
    assert [r["code"] for r in top_issues(_rows(), limit=1)] == ["CHK-02"]
    assert top_issues(_rows(), limit=0) == []
    assert top_issues(_rows(), limit=-3) == []


def test_problematic_equipment():
    out = problematic_equipment(_rows(), station_of={1: "AQP", 2: "CUZ"})
    assert out == [
        {"code": "TLM-EN-001", "issues": 3, "inspections": 1, "stations": ["CUZ"]},
        {"code": "TLM-FT-001", "issues": 1, "inspections": 1, "stations": ["AQP"]},
    ]


def test_overall_stats_only_uses_completed_inspections():
    rows = _rows()
    inspections = [
        {"status": "completed", "inspection_date": date(2024, 3, 2), "equipment": rows[:1]},
        {"status": "completed", "inspection_date": date(2024, 2, 20), "equipment": rows[1:]},
        {"status": "pending", "inspection_date": date(2024, 3, 3), "equipment": rows},
    ]
    out = overall_stats(inspections, today=date(2024, 3, 10), top_limit=2)

    assert out["total_inspections"] == 3
    assert out["completed_inspections"] == 2
    assert out["completed_this_month"] == 1
    assert out["equipment_inspected"] == 3
    assert out["conformity_rate"] == 29
    assert len(out["top_issues"]) == 2
