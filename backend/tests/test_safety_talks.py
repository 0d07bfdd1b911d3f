# backend/tests/test_safety_talks.py
from __future__ import annotations

from inspector360.domain.safety_talks import (
    position_priority,
    schedules_for_station,
    sort_employees_by_hierarchy,
    suggest_talk,
)


def test_position_priority():
    assert position_priority("Jefe de Rampa") == 1
    assert position_priority("Supervisor de turno") == 2
    assert position_priority("Operario") == 6
    assert position_priority("Practicante") == 9
    assert position_priority(None) == 10
    assert position_priority("  ") == 10


def test_sort_employees_by_hierarchy_then_name():
    employees = [
        {"full_name": "Zoe", "position": "Practicante"},
        {"full_name": "Ana", "position": None},
        {"full_name": "Luis", "position": "Jefe de Rampa"},
        {"full_name": "Beto", "position": "Supervisor"},
        {"full_name": "Carla", "position": "Operario"},
        {"full_name": "alba", "position": "Supervisor de turno"},
    ]
    out = [e["full_name"] for e in sort_employees_by_hierarchy(employees)]
    assert out == ["Luis", "alba", "Beto", "Carla", "Zoe", "Ana"]


def test_suggest_talk_prefers_mandatory_not_yet_executed():
    candidates = [
        {"id": 1, "is_mandatory": False},
        {"id": 2, "is_mandatory": True},
        {"id": 3, "is_mandatory": True},
    ]
    assert suggest_talk(candidates, [])["id"] == 2
    assert suggest_talk(candidates, [2])["id"] == 3
    assert suggest_talk(candidates, [2, 3])["id"] == 1
    assert suggest_talk(candidates, [1, 2, 3]) is None
    assert suggest_talk([], []) is None


def test_schedules_for_station_includes_global():
    schedules = [
        {"id": 1, "station_code": None},
        {"id": 2, "station_code": "AQP"},
        {"id": 3, "station_code": "CUZ"},
    ]
    assert [s["id"] for s in schedules_for_station(schedules, "aqp")] == [1, 2]
