# backend/tests/test_talks_api.py
from __future__ import annotations

import pytest

from conftest import ADMIN, inspector_of, supervisor_of
from inspector360.models import Bulletin, Employee, TalkSchedule
from inspector360.services.clock import station_today


@pytest.fixture()
def talks(db_session, stations):
    b1 = Bulletin(code="BOL-001", title="Uso de calzas", alert_level="AMBAR")
    b2 = Bulletin(code="BOL-002", title="FOD en plataforma", alert_level="ROJA")
    db_session.add_all([b1, b2])
    db_session.flush()

    today = station_today()
    optional = TalkSchedule(scheduled_date=today, bulletin_id=b1.id, station_code="AQP", is_mandatory=False)
    mandatory = TalkSchedule(scheduled_date=today, bulletin_id=b2.id, station_code=None, is_mandatory=True)
    other_station = TalkSchedule(scheduled_date=today, bulletin_id=b1.id, station_code="CUZ", is_mandatory=True)
    db_session.add_all([optional, mandatory, other_station])

    employees = [
        Employee(dni="40000001", full_name="Zoe Quispe", position="Practicante", station_code="AQP"),
        Employee(dni="40000002", full_name="Luis Mamani", position="Jefe de Estación", station_code="AQP"),
        Employee(dni="40000003", full_name="Carla Ramos", position="Operario", station_code="AQP"),
        Employee(dni="40000004", full_name="Beto Cruz", position="Supervisor", station_code="CUZ"),
    ]
    db_session.add_all(employees)
    db_session.commit()
    return {"optional": optional.id, "mandatory": mandatory.id, "employees": [e.id for e in employees]}


def test_suggested_talk_moves_on_after_execution(client, talks):
    headers = supervisor_of("AQP")

    r = client.get("/api/talks/suggested", headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["id"] == talks["mandatory"]
    assert r.json()["bulletin"]["code"] == "BOL-002"

    presenter, *attendees = talks["employees"][:3]
    r = client.post(
        "/api/talks/executions",
        headers=headers,
        json={
            "station_code": "AQP",
            "schedule_id": talks["mandatory"],
            "presenter_id": presenter,
            "start_time": "07:00",
            "end_time": "07:10",
            "duration_min": 10,
            "attendees": [{"employee_id": i, "signature": "sig"} for i in attendees],
        },
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["scheduled_headcount"] == 3
    assert len(body["attendees"]) == 2

    r = client.get("/api/talks/suggested", headers=headers)
    assert r.json()["id"] == talks["optional"]


def test_execution_rejects_duplicate_attendees(client, talks):
    emp = talks["employees"][0]
    r = client.post(
        "/api/talks/executions",
        headers=supervisor_of("AQP"),
        json={
            "station_code": "AQP",
            "presenter_id": emp,
            "attendees": [{"employee_id": emp}, {"employee_id": emp}],
        },
    )
    assert r.status_code == 422, r.text


def test_employees_listed_by_hierarchy(client, talks):
    r = client.get("/api/talks/employees", headers=supervisor_of("AQP"))
    assert r.status_code == 200, r.text
    assert [e["full_name"] for e in r.json()] == ["Luis Mamani", "Carla Ramos", "Zoe Quispe"]


def test_bulk_employees_creates_missing_station(client, talks):
    rows = [
        {"dni": "40000003", "full_name": "Carla Ramos", "position": "Líder de rampa", "station_code": "AQP"},
        {"dni": "50000001", "full_name": "Pedro Salas", "station_code": "tpp"},
    ]
    r = client.post("/api/talks/employees/bulk", headers=ADMIN, json=rows)
    assert r.status_code == 200, r.text
    assert r.json() == {"created": 1, "updated": 1, "stations_created": ["TPP"], "errors": []}

    r = client.get("/api/stations", headers=ADMIN)
    assert "TPP" in [s["code"] for s in r.json()]


def test_bulk_employees_requires_permission(client, talks):
    r = client.post("/api/talks/employees/bulk", headers=inspector_of("AQP"), json=[])
    assert r.status_code == 403


def test_bulletins(client, talks):
    r = client.post(
        "/api/talks/bulletins", headers=ADMIN, json={"code": "bol-003", "title": "Chalecos", "alert_level": "verde"}
    )
    assert r.status_code == 201, r.text
    assert (r.json()["code"], r.json()["alert_level"]) == ("BOL-003", "VERDE")

    r = client.post("/api/talks/bulletins", headers=ADMIN, json={"code": "BOL-003", "title": "x"})
    assert r.status_code == 409

    r = client.post("/api/talks/bulletins", headers=ADMIN, json={"code": "BOL-004", "title": "x", "alert_level": "AZUL"})
    assert r.status_code == 422
