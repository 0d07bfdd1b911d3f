# backend/inspector360/services/ownership.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import Principal, ensure_station_access
from ..models import Bulletin, Employee, Inspection, Station, TalkExecution, TalkSchedule


def must_get_inspection(db: Session, *, p: Principal, inspection_id: int) -> Inspection:
    row = db.scalar(
        select(Inspection)
        .where(Inspection.id == inspection_id)
        .options(selectinload(Inspection.equipment), selectinload(Inspection.observations))
    )
    if not row:
        raise HTTPException(status_code=404, detail="inspection not found")
    ensure_station_access(p, row.station)
    return row


def must_get_station(db: Session, *, code: str) -> Station:
    row = db.get(Station, (code or "").strip().upper())
    if not row:
        raise HTTPException(status_code=404, detail="station not found")
    return row


def must_get_active_station(db: Session, *, code: str) -> Station:
    row = must_get_station(db, code=code)
    if not row.is_active:
        raise HTTPException(status_code=409, detail=f"station {row.code} is inactive")
    return row


def must_get_employee(db: Session, *, p: Principal, employee_id: int) -> Employee:
    row = db.get(Employee, employee_id)
    if not row:
        raise HTTPException(status_code=404, detail="employee not found")
    ensure_station_access(p, row.station_code)
    return row


def must_get_bulletin(db: Session, *, bulletin_id: int) -> Bulletin:
    row = db.get(Bulletin, bulletin_id)
    if not row:
        raise HTTPException(status_code=404, detail="bulletin not found")
    return row


def must_get_schedule(db: Session, *, schedule_id: int) -> TalkSchedule:
    row = db.get(TalkSchedule, schedule_id)
    if not row:
        raise HTTPException(status_code=404, detail="talk schedule not found")
    return row


def must_get_execution(db: Session, *, p: Principal, execution_id: int) -> TalkExecution:
    row = db.scalar(
        select(TalkExecution)
        .where(TalkExecution.id == execution_id)
        .options(selectinload(TalkExecution.attendees))
    )
    if not row:
        raise HTTPException(status_code=404, detail="talk execution not found")
    ensure_station_access(p, row.station_code)
    return row
