# backend/inspector360/routers/talks.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal, require_admin
from ..db import get_db
from ..schemas import (
    BulkResultOut,
    BulletinIn,
    BulletinOut,
    EmployeeIn,
    EmployeeOut,
    EmployeeUpdate,
    TalkExecutionIn,
    TalkExecutionOut,
    TalkScheduleIn,
    TalkScheduleOut,
)
from ..services import talks_service as svc
from ..services.ownership import must_get_employee, must_get_execution

router = APIRouter(prefix="/talks", tags=["talks"])


# -----------------------------
# Schedules
# -----------------------------
@router.get("/suggested", response_model=Optional[TalkScheduleOut])
def suggested(
    station: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.suggested_talk(db, p=p, station=station)


@router.get("/schedules", response_model=list[TalkScheduleOut])
def list_schedules(
    station: Optional[str] = Query(default=None),
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.list_schedules(db, p=p, station=station, start=start, end=end)


@router.post("/schedules", response_model=TalkScheduleOut, status_code=201)
def create_schedule(payload: TalkScheduleIn, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return svc.create_schedule(db, p=p, payload=payload)


# -----------------------------
# Executions
# -----------------------------
@router.get("/executions", response_model=list[TalkExecutionOut])
def list_executions(
    station: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.list_executions(db, p=p, station=station)


@router.post("/executions", response_model=TalkExecutionOut, status_code=201)
def register_execution(payload: TalkExecutionIn, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return svc.register_execution(db, p=p, payload=payload)


@router.delete("/executions/{execution_id}", status_code=204)
def delete_execution(execution_id: int, db: Session = Depends(get_db), p: Principal = Depends(require_admin)):
    talk = must_get_execution(db, p=p, execution_id=execution_id)
    svc.delete_execution(db, p=p, talk=talk)


# -----------------------------
# Employees
# -----------------------------
@router.get("/employees", response_model=list[EmployeeOut])
def list_employees(
    station: Optional[str] = Query(default=None),
    active: Optional[bool] = Query(default=True),
    q: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.list_employees(db, p=p, station=station, active=active, q=q)


@router.patch("/employees/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    emp = must_get_employee(db, p=p, employee_id=employee_id)
    return svc.update_employee(db, p=p, emp=emp, payload=payload)


@router.post("/employees/bulk", response_model=BulkResultOut)
def bulk_employees(rows: list[EmployeeIn], db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return svc.bulk_upsert_employees(db, p=p, rows=rows)


# -----------------------------
# Bulletins
# -----------------------------
@router.get("/bulletins", response_model=list[BulletinOut])
def list_bulletins(
    active: Optional[bool] = Query(default=True),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.list_bulletins(db, active=active)


@router.post("/bulletins", response_model=BulletinOut, status_code=201)
def create_bulletin(payload: BulletinIn, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return svc.create_bulletin(db, p=p, payload=payload)


@router.post("/bulletins/bulk", response_model=BulkResultOut)
def bulk_bulletins(rows: list[BulletinIn], db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return svc.bulk_upsert_bulletins(db, p=p, rows=rows)
