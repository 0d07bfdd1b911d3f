# backend/tests/test_cross_station_access.py
from __future__ import annotations

from conftest import supervisor_of
from inspector360.models import Bulletin, Employee, TalkSchedule
from inspector360.services.clock import station_today


def _seed(db):
    b = Bulletin(code="BOL-010", title="Conos de seguridad", alert_level="VERDE")
    db.add(b)
    db.flush()
    cuz_schedule = TalkSchedule(scheduled_date=station_today(), bulletin_id=b.id, station_code="CUZ", is_mandatory=True)
    aqp = Employee(dni="61000001", full_name="Rosa Flores", position="Supervisor", station_code="AQP")
    cuz = Employee(dni="777", full_name="Hugo Apaza", position="Operario", station_code="CUZ")
    db.add_all([cuz_schedule, aqp, cuz])
    db.commit()
    return cuz_schedule, aqp, cuz


def test_execution_against_other_station_schedule_is_blocked(client, db_session, stations):
    schedule, aqp, _ = _seed(db_session)

    r = client.post(
        "/api/talks/executions",
        headers=supervisor_of("AQP"),
        json={"station_code": "AQP", "schedule_id": schedule.id, "presenter_id": aqp.id, "attendees": []},
    )
    assert r.status_code == 403, r.text

    db_session.refresh(schedule)
    assert schedule.is_completed is False


def test_execution_with_other_station_people_is_rejected(client, db_session, stations):
    _, aqp, cuz = _seed(db_session)
    headers = supervisor_of("AQP")

    r = client.post(
        "/api/talks/executions",
        headers=headers,
        json={"station_code": "AQP", "presenter_id": cuz.id, "attendees": []},
    )
    assert r.status_code == 422

    r = client.post(
        "/api/talks/executions",
        headers=headers,
        json={"station_code": "AQP", "presenter_id": aqp.id, "attendees": [{"employee_id": cuz.id}]},
    )
    assert r.status_code == 422
    assert str(cuz.id) in r.json()["detail"]


def test_bulk_upsert_cannot_pull_employee_from_other_station(client, db_session, stations):
    _, _, cuz = _seed(db_session)

    r = client.post(
        "/api/talks/employees/bulk",
        headers=supervisor_of("AQP"),
        json=[{"dni": "777", "full_name": "Hugo Apaza", "station_code": "AQP"}],
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["updated"] == 0
    assert len(body["errors"]) == 1 and body["errors"][0].startswith("row 1:")

    db_session.refresh(cuz)
    assert cuz.station_code == "CUZ"
