# backend/tests/test_station_compliance.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from inspector360.domain.compliance import (
    Period,
    en_equipment_heatmap,
    en_equipment_stats,
    punctuality_rate,
    station_compliance_status,
    station_daily_status,
)
from inspector360.domain.compliance.stations import is_punctual

STATIONS = [
    {"code": "AQP", "name": "Arequipa"},
    {"code": "CUZ", "name": "Cusco"},
    {"code": "PIU", "name": "Piura"},
]

NOV_1_10 = Period(date(2023, 11, 1), date(2023, 11, 10))


def _signed(station: str, d: date, created: datetime, code: str = "TLM-FT-001"):
    return {
        "station": station,
        "status": "completed",
        "inspection_date": d,
        "created_at": created,
        "supervisor_signature_url": "sig",
        "equipment": [{"code": code}],
        "observations": [],
    }


def test_punctuality_window():
    on_time = {"inspection_date": date(2023, 11, 10), "created_at": datetime(2023, 11, 12, 23, 0)}
    late = {"inspection_date": date(2023, 11, 10), "created_at": datetime(2023, 11, 13, 0, 5)}
    unknown = {"inspection_date": date(2023, 11, 10), "created_at": None}

    assert is_punctual(on_time) is True
    assert is_punctual(late) is False
    assert punctuality_rate([on_time, late, unknown]) == 33
    assert punctuality_rate([]) == 0


def test_punctuality_uses_station_day_for_utc_timestamps():
    # 03:00 UTC on the 13th is still the 12th in Lima
    row = {"inspection_date": date(2023, 11, 10), "created_at": datetime(2023, 11, 13, 3, 0, tzinfo=timezone.utc)}
    assert is_punctual(row) is True


def test_station_ranking():
    rows = []
    for d in range(1, 6):
        day = date(2023, 11, d)
        rows.append(_signed("AQP", day, datetime(2023, 11, d, 18, 0)))
        rows.append(_signed("CUZ", day, datetime(2023, 11, d, 18, 0) + timedelta(days=5), code="TLM-FT-002"))
    rows.append(
        {
            "station": "PIU",
            "status": "pending",
            "inspection_date": date(2023, 11, 3),
            "created_at": datetime(2023, 11, 3, 9, 0),
            "supervisor_signature_url": None,
            "equipment": [{"code": "TLM-FT-003"}],
            "observations": [],
        }
    )
    master = [
        {"code": "TLM-FT-001", "station": "AQP"},
        {"code": "TLM-EN-001", "station": "AQP"},
        {"code": "TLM-FT-002", "station": "CUZ"},
    ]

    out = station_compliance_status(rows, STATIONS, NOV_1_10, today=date(2023, 12, 1), equipment_master=master)
    assert [r["code"] for r in out] == ["AQP", "CUZ", "PIU"]

    aqp, cuz, piu = out
    assert (aqp["count"], aqp["days_with_inspection"], aqp["compliance_rate"], aqp["punctuality_rate"]) == (5, 5, 50, 100)
    assert (aqp["equipment_count"], aqp["equipment_total"], aqp["coverage_rate"]) == (1, 2, 50)
    assert (cuz["compliance_rate"], cuz["punctuality_rate"], cuz["coverage_rate"]) == (50, 0, 100)
    assert (piu["count"], piu["compliance_rate"], piu["pending_count"]) == (0, 0, 1)
    assert aqp["pending_count"] == 0


def test_station_daily_status_grid():
    rows = [_signed("AQP", date(2023, 11, 2), datetime(2023, 11, 2, 10, 0))]
    out = station_daily_status(rows, STATIONS[:1], Period(date(2023, 11, 1), date(2023, 11, 4)), today=date(2023, 11, 3))
    assert [d["status"] for d in out[0]["days"]] == ["missing", "completed", "missing", "future"]


def test_en_heatmap_and_stats():
    master = [
        {"code": "TLM-EN-001", "station": "AQP"},
        {"code": "TLM-EN-002", "station": "CUZ"},
        {"code": "TLM-FT-001", "station": "PIU"},
    ]
    inspections = [
        {
            "station": "AQP",
            "status": "completed",
            "inspection_date": date(2023, 11, 1),
            "equipment": [{"code": "TLM-EN-001"}],
            "observations": [{"equipment_code": "TLM-EN-001"}],
        },
        {
            "station": "AQP",
            "status": "completed",
            "inspection_date": date(2023, 11, 2),
            "equipment": [{"code": "TLM-FT-001"}],
            "observations": [],
        },
        {
            "station": "CUZ",
            "status": "pending",
            "inspection_date": date(2023, 11, 1),
            "equipment": [{"code": "TLM-EN-002"}],
            "observations": [],
        },
    ]
    grid = en_equipment_heatmap(
        master, inspections, Period(date(2023, 11, 1), date(2023, 11, 3)), today=date(2023, 11, 2)
    )
    assert [row["station"] for row in grid] == ["AQP", "CUZ"]

    aqp_days = grid[0]["days"]
    assert (aqp_days[0]["inspected"], aqp_days[0]["has_observations"]) == (True, True)
    assert aqp_days[1]["inspected"] is False
    assert aqp_days[2]["is_future"] is True
    assert not any(d["inspected"] for d in grid[1]["days"])

    stats = en_equipment_stats(grid)
    assert stats == {
        "total_stations": 2,
        "total_days": 3,
        "total_possible": 4,
        "total_inspected": 1,
        "total_with_observations": 1,
        "compliance_rate": 25,
        "observation_rate": 100,
    }


def test_en_heatmap_station_filter():
    master = [{"code": "TLM-EN-001", "station": "AQP"}, {"code": "TLM-EN-002", "station": "CUZ"}]
    grid = en_equipment_heatmap(master, [], Period(date(2023, 11, 1), date(2023, 11, 1)), station="cuz")
    assert [row["station"] for row in grid] == ["CUZ"]
