# backend/inspector360/routers/stations.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal, require_admin
from ..db import get_db
from ..domain.audit import audit_write
from ..models import Inspection, Station
from ..schemas import StationOut, StationUpsert
from ..services.ownership import must_get_station

router = APIRouter(prefix="/stations", tags=["stations"])


@router.get("", response_model=list[StationOut])
def list_stations(db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return db.scalars(select(Station).order_by(Station.code)).all()


@router.get("/active", response_model=list[StationOut])
def list_active_stations(db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return db.scalars(select(Station).where(Station.is_active.is_(True)).order_by(Station.code)).all()


@router.put("", response_model=StationOut)
def upsert_station(
    payload: StationUpsert,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    code = payload.code.strip().upper()
    row = db.get(Station, code)
    before = None
    if row is None:
        row = Station(code=code)
        db.add(row)
    else:
        before = {"name": row.name, "is_active": row.is_active}

    row.name = payload.name.strip()
    row.address = payload.address
    row.ruc = payload.ruc
    row.legal_name = payload.legal_name
    row.is_active = payload.is_active

    audit_write(
        db,
        actor_email=p.email,
        action="station.upsert",
        entity_type="station",
        entity_id=code,
        station=code,
        before=before,
        after={"name": row.name, "is_active": row.is_active},
    )
    db.commit()
    db.refresh(row)
    return row


def _set_active(db: Session, p: Principal, code: str, active: bool) -> Station:
    row = must_get_station(db, code=code)
    row.is_active = active
    audit_write(
        db,
        actor_email=p.email,
        action="station.activate" if active else "station.deactivate",
        entity_type="station",
        entity_id=row.code,
        station=row.code,
    )
    db.commit()
    db.refresh(row)
    return row


@router.post("/{code}/activate", response_model=StationOut)
def activate_station(code: str, db: Session = Depends(get_db), p: Principal = Depends(require_admin)):
    return _set_active(db, p, code, True)


@router.post("/{code}/deactivate", response_model=StationOut)
def deactivate_station(code: str, db: Session = Depends(get_db), p: Principal = Depends(require_admin)):
    return _set_active(db, p, code, False)


@router.delete("/{code}", status_code=204)
def delete_station(code: str, db: Session = Depends(get_db), p: Principal = Depends(require_admin)):
    row = must_get_station(db, code=code)
    used = db.scalar(select(func.count()).select_from(Inspection).where(Inspection.station == row.code))
    if used:
        raise HTTPException(status_code=409, detail=f"station {row.code} has inspections; deactivate it instead")
    audit_write(db, actor_email=p.email, action="station.delete", entity_type="station", entity_id=row.code)
    db.delete(row)
    db.commit()
