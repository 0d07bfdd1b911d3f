# backend/tests/test_compliance_api.py
from __future__ import annotations

from datetime import date, datetime

import pytest

from conftest import ADMIN, supervisor_of
from inspector360.models import Equipment, EquipmentMaster, Inspection, Observation


def _inspection(station: str, d: date, status: str = "completed", equipment=(), observations=()) -> Inspection:
    insp = Inspection(
        station=station,
        inspection_date=d,
        inspection_type="periodica",
        inspector_name="Juan",
        status=status,
        supervisor_signature_url="sig" if status == "completed" else None,
        created_at=datetime(d.year, d.month, d.day, 18, 0),
    )
    for idx, (code, checklist) in enumerate(equipment):
        insp.equipment.append(Equipment(code=code, type="x", station=station, checklist_data=checklist, order_index=idx))
    for idx, (obs_id, code) in enumerate(observations):
        insp.observations.append(
            Observation(obs_id=obs_id, equipment_code=code, obs_operator="x", obs_maintenance="ok", order_index=idx)
        )
    return insp


@pytest.fixture()
def november(db_session, stations):
    rows = [
        _inspection("AQP", date(2023, 11, d), equipment=[("TLM-FT-001", {"CHK-01": {"status": "conforme"}})])
        for d in (12, 13, 15, 20)
    ]
    rows.append(
        _inspection(
            "AQP",
            date(2023, 11, 12),
            equipment=[("TLM-EN-001", {"CHK-14": {"status": "no_conforme", "observations": "Peldaño"}})],
            observations=[("OBS-001", "TLM-EN-001")],
        )
    )
    rows.append(_inspection("CUZ", date(2023, 11, 14), status="pending", equipment=[("TLM-FT-002", {})]))
    db_session.add_all(rows)
    db_session.add_all(
        [
            EquipmentMaster(code="TLM-FT-001", station="AQP", type="Tractor"),
            EquipmentMaster(code="TLM-EN-001", station="AQP", type="Escalera manual"),
            EquipmentMaster(code="TLM-FT-002", station="CUZ", type="Tractor"),
        ]
    )
    db_session.commit()
    return rows


WINDOW = {"start": "2023-11-12", "end": "2023-11-27"}


def test_daily_compliance(client, november):
    r = client.get("/api/compliance/daily", headers=ADMIN, params={**WINDOW, "station": "AQP"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["days_in_period"] == 16
    assert body["days_with_inspection"] == 4
    assert body["compliance_rate"] == 25
    assert len(body["breakdown"]) == 16


def test_breakdown_and_top_issues(client, november):
    r = client.get("/api/compliance/breakdown", headers=ADMIN, params=WINDOW)
    assert r.status_code == 200, r.text
    assert (r.json()["conforme"], r.json()["no_conforme"]) == (4, 1)
    assert r.json()["conformity_rate"] == 80

    r = client.get("/api/compliance/top-issues", headers=ADMIN, params=WINDOW)
    assert [row["code"] for row in r.json()] == ["CHK-14"]

    r = client.get("/api/compliance/problematic-equipment", headers=ADMIN, params=WINDOW)
    assert r.json() == [{"code": "TLM-EN-001", "issues": 1, "inspections": 1, "stations": ["AQP"]}]


def test_station_ranking(client, november):
    r = client.get("/api/compliance/stations", headers=ADMIN, params=WINDOW)
    assert r.status_code == 200, r.text
    rows = r.json()
    # active stations only
    assert [row["code"] for row in rows] == ["AQP", "CUZ"]
    assert rows[0]["compliance_rate"] == 25
    assert rows[0]["punctuality_rate"] == 100
    assert rows[0]["coverage_rate"] == 100
    assert rows[1]["pending_count"] == 1


def test_station_daily_grid(client, november):
    r = client.get("/api/compliance/stations/daily", headers=ADMIN, params={"start": "2023-11-12", "end": "2023-11-14"})
    assert r.status_code == 200, r.text
    aqp = r.json()[0]
    assert [d["status"] for d in aqp["days"]] == ["completed", "completed", "missing"]


def test_en_equipment(client, november):
    r = client.get("/api/compliance/en-equipment", headers=ADMIN, params=WINDOW)
    assert r.status_code == 200, r.text
    body = r.json()
    assert [row["station"] for row in body["stations"]] == ["AQP"]
    assert body["stats"]["total_inspected"] == 1
    assert body["stats"]["total_with_observations"] == 1


def test_trends_and_monthly(client, november):
    r = client.get("/api/compliance/trends", headers=ADMIN, params={"start": "2023-01-01", "end": "2023-12-31"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["granularity"] == "month"
    nov = next(p for p in body["points"] if p["key"] == "2023-11")
    assert nov["count"] == 5

    r = client.get("/api/compliance/monthly", headers=ADMIN)
    assert r.json() == [{"month": "2023-11", "label": "Nov 2023", "inspections": 5}]


def test_month_parameter(client, november):
    r = client.get("/api/compliance/daily", headers=ADMIN, params={"month": "2023-11", "station": "AQP"})
    assert r.status_code == 200, r.text
    assert r.json()["days_in_period"] == 30
    assert r.json()["days_with_inspection"] == 4


@pytest.mark.parametrize(
    "params",
    [
        {"month": "2023-13"},
        {"month": "noviembre"},
        {"start": "2023-11-20", "end": "2023-11-10"},
        {"end": "2023-11-10"},
        {"start": "2000-01-01", "end": "9999-12-31"},
    ],
)
def test_bad_period_is_422(client, november, params):
    r = client.get("/api/compliance/daily", headers=ADMIN, params=params)
    assert r.status_code == 422, r.text


def test_station_users_only_see_their_station(client, november):
    headers = supervisor_of("CUZ")
    r = client.get("/api/compliance/daily", headers=headers, params=WINDOW)
    assert r.status_code == 200, r.text
    assert r.json()["days_with_inspection"] == 0

    r = client.get("/api/compliance/daily", headers=headers, params={**WINDOW, "station": "AQP"})
    assert r.status_code == 403
