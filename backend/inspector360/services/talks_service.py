# backend/inspector360/services/talks_service.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..auth import Principal, scope_station
from ..domain.audit import audit_write
from ..domain.safety_talks import schedules_for_station, sort_employees_by_hierarchy, suggest_talk
from ..models import Bulletin, Employee, Station, TalkAttendee, TalkExecution, TalkSchedule
from ..schemas import BulletinIn, EmployeeIn, EmployeeUpdate, TalkExecutionIn, TalkScheduleIn
from .clock import station_today
from .ownership import must_get_bulletin, must_get_schedule

log = logging.getLogger("inspector360.talks")

ALERT_LEVELS: frozenset[str] = frozenset({"ROJA", "AMBAR", "VERDE"})


def _require(p: Principal, flag: str) -> None:
    if not p.can(flag):
        raise HTTPException(status_code=403, detail=f"Role {p.role} lacks {flag}")


# -----------------------------
# Schedules / suggestion
# -----------------------------
def suggested_talk(db: Session, *, p: Principal, station: Optional[str], today: Optional[date] = None) -> Optional[TalkSchedule]:
    st = scope_station(p, station)
    if not st:
        raise HTTPException(status_code=422, detail="station is required")
    today = today or station_today()

    todays = db.scalars(
        select(TalkSchedule)
        .where(TalkSchedule.scheduled_date == today)
        .options(selectinload(TalkSchedule.bulletin))
    ).all()
    candidates = schedules_for_station(todays, st)
    if not candidates:
        return None

    executed = db.scalars(
        select(TalkExecution.schedule_id).where(
            TalkExecution.station_code == st,
            TalkExecution.schedule_id.in_([c.id for c in candidates]),
        )
    ).all()
    return suggest_talk(candidates, executed)


def list_schedules(
    db: Session,
    *,
    p: Principal,
    station: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[TalkSchedule]:
    st = scope_station(p, station)
    stmt = select(TalkSchedule).options(selectinload(TalkSchedule.bulletin))
    if start:
        stmt = stmt.where(TalkSchedule.scheduled_date >= start)
    if end:
        stmt = stmt.where(TalkSchedule.scheduled_date <= end)
    rows = db.scalars(stmt.order_by(TalkSchedule.scheduled_date, TalkSchedule.id)).all()
    return schedules_for_station(rows, st) if st else list(rows)


def create_schedule(db: Session, *, p: Principal, payload: TalkScheduleIn) -> TalkSchedule:
    _require(p, "can_access_settings")
    must_get_bulletin(db, bulletin_id=payload.bulletin_id)
    station = (payload.station_code or "").strip().upper() or None
    if station is not None or not p.can("can_view_all_stations"):
        station = scope_station(p, station)

    row = TalkSchedule(
        scheduled_date=payload.scheduled_date,
        bulletin_id=payload.bulletin_id,
        station_code=station,
        is_mandatory=payload.is_mandatory,
    )
    db.add(row)
    db.flush()
    audit_write(
        db,
        actor_email=p.email,
        action="talk.schedule.create",
        entity_type="talk_schedule",
        entity_id=row.id,
        station=station,
        after={"scheduled_date": row.scheduled_date, "bulletin_id": row.bulletin_id},
    )
    db.commit()
    db.refresh(row)
    return row


# -----------------------------
# Executions
# -----------------------------
def register_execution(db: Session, *, p: Principal, payload: TalkExecutionIn) -> TalkExecution:
    """Header and attendees are written in one transaction."""
    station = scope_station(p, payload.station_code) or ""
    if not station:
        raise HTTPException(status_code=422, detail="station_code is required")

    presenter = db.get(Employee, payload.presenter_id)
    if presenter is None:
        raise HTTPException(status_code=422, detail="presenter not found")
    if presenter.station_code != station:
        raise HTTPException(status_code=422, detail=f"presenter does not belong to {station}")

    attendee_ids = [a.employee_id for a in payload.attendees]
    if len(set(attendee_ids)) != len(attendee_ids):
        raise HTTPException(status_code=422, detail="duplicate attendee")
    if attendee_ids:
        found = dict(db.execute(select(Employee.id, Employee.station_code).where(Employee.id.in_(attendee_ids))).all())
        missing = [i for i in attendee_ids if i not in found]
        if missing:
            raise HTTPException(status_code=422, detail=f"unknown employees: {missing}")
        foreign = [i for i in attendee_ids if found[i] != station]
        if foreign:
            raise HTTPException(status_code=422, detail=f"employees not in {station}: {foreign}")

    bulletin_id = payload.bulletin_id
    schedule: Optional[TalkSchedule] = None
    if payload.schedule_id is not None:
        schedule = must_get_schedule(db, schedule_id=payload.schedule_id)
        # network-wide schedules (no station) may be executed anywhere
        if schedule.station_code is not None and schedule.station_code != station:
            raise HTTPException(status_code=403, detail=f"schedule {schedule.id} belongs to {schedule.station_code}")
        bulletin_id = bulletin_id or schedule.bulletin_id
    elif bulletin_id is not None:
        must_get_bulletin(db, bulletin_id=bulletin_id)

    headcount = db.scalar(
        select(func.count()).select_from(Employee).where(Employee.station_code == station, Employee.is_active.is_(True))
    )

    talk = TalkExecution(
        schedule_id=payload.schedule_id,
        bulletin_id=bulletin_id,
        station_code=station,
        executed_at=payload.executed_at or station_today(),
        start_time=payload.start_time,
        end_time=payload.end_time,
        duration_min=payload.duration_min,
        scheduled_headcount=int(headcount or 0),
        presenter_id=payload.presenter_id,
        presenter_signature=payload.presenter_signature,
        activity_type=payload.activity_type,
        observations=payload.observations,
    )
    for a in payload.attendees:
        talk.attendees.append(TalkAttendee(employee_id=a.employee_id, signature=a.signature, attended=a.attended))

    if schedule is not None and schedule.station_code is not None:
        schedule.is_completed = True

    db.add(talk)
    db.flush()
    audit_write(
        db,
        actor_email=p.email,
        action="talk.execution.create",
        entity_type="talk_execution",
        entity_id=talk.id,
        station=station,
        after={"schedule_id": talk.schedule_id, "attendees": len(attendee_ids)},
    )
    db.commit()
    db.refresh(talk)
    log.info("talk registered", extra={"station": station, "user_email": p.email})
    return talk


def delete_execution(db: Session, *, p: Principal, talk: TalkExecution) -> None:
    talk_id, station = talk.id, talk.station_code
    audit_write(
        db,
        actor_email=p.email,
        action="talk.execution.delete",
        entity_type="talk_execution",
        entity_id=talk_id,
        station=station,
    )
    db.delete(talk)
    db.commit()


def list_executions(db: Session, *, p: Principal, station: Optional[str] = None) -> list[TalkExecution]:
    st = scope_station(p, station)
    stmt = select(TalkExecution).options(selectinload(TalkExecution.attendees))
    if st:
        stmt = stmt.where(TalkExecution.station_code == st)
    return list(db.scalars(stmt.order_by(TalkExecution.executed_at.desc(), TalkExecution.id.desc())).all())


# -----------------------------
# Employees
# -----------------------------
def list_employees(
    db: Session,
    *,
    p: Principal,
    station: Optional[str] = None,
    active: Optional[bool] = True,
    q: Optional[str] = None,
) -> list[Employee]:
    st = scope_station(p, station)
    stmt = select(Employee)
    if st:
        stmt = stmt.where(Employee.station_code == st)
    if active is not None:
        stmt = stmt.where(Employee.is_active.is_(active))
    if q and q.strip():
        like = f"%{q.strip()}%"
        stmt = stmt.where((Employee.full_name.ilike(like)) | (Employee.dni.ilike(like)))
    return sort_employees_by_hierarchy(db.scalars(stmt).all())


def update_employee(db: Session, *, p: Principal, emp: Employee, payload: EmployeeUpdate) -> Employee:
    _require(p, "can_manage_employees")
    data = payload.model_dump(exclude_unset=True)
    if "station_code" in data and data["station_code"]:
        data["station_code"] = scope_station(p, data["station_code"])
    before = {"full_name": emp.full_name, "position": emp.position, "station_code": emp.station_code, "is_active": emp.is_active}
    for k, v in data.items():
        setattr(emp, k, v)
    audit_write(
        db,
        actor_email=p.email,
        action="employee.update",
        entity_type="employee",
        entity_id=emp.id,
        station=emp.station_code,
        before=before,
        after=data,
    )
    db.commit()
    db.refresh(emp)
    return emp


def bulk_upsert_employees(db: Session, *, p: Principal, rows: list[EmployeeIn]) -> dict[str, Any]:
    """Upsert by DNI. Stations referenced but not registered yet are created on the fly."""
    _require(p, "can_manage_employees")

    created = updated = 0
    stations_created: list[str] = []
    errors: list[str] = []

    known_stations = set(db.scalars(select(Station.code)).all())
    for idx, row in enumerate(rows, start=1):
        station = row.station_code.strip().upper()
        try:
            scope_station(p, station)
        except HTTPException as e:
            errors.append(f"row {idx}: {e.detail}")
            continue

        dni = row.dni.strip()
        emp = db.scalar(select(Employee).where(Employee.dni == dni))
        if emp is not None:
            try:
                scope_station(p, emp.station_code)
            except HTTPException as e:
                errors.append(f"row {idx}: {e.detail}")
                continue

        if station not in known_stations:
            db.add(Station(code=station, name=station))
            known_stations.add(station)
            stations_created.append(station)

        if emp is None:
            db.add(
                Employee(
                    dni=dni,
                    full_name=row.full_name.strip(),
                    position=row.position,
                    area=row.area,
                    station_code=station,
                    is_active=row.is_active,
                )
            )
            created += 1
        else:
            emp.full_name = row.full_name.strip()
            emp.position = row.position
            emp.area = row.area
            emp.station_code = station
            emp.is_active = row.is_active
            updated += 1
        db.flush()

    audit_write(
        db,
        actor_email=p.email,
        action="employee.bulk_upsert",
        entity_type="employee",
        entity_id="bulk",
        after={"created": created, "updated": updated, "stations_created": stations_created},
    )
    db.commit()
    return {"created": created, "updated": updated, "stations_created": stations_created, "errors": errors}


# -----------------------------
# Bulletins
# -----------------------------
def _check_alert_level(level: str) -> str:
    lv = (level or "").strip().upper()
    if lv not in ALERT_LEVELS:
        raise HTTPException(status_code=422, detail=f"alert_level must be one of {sorted(ALERT_LEVELS)}")
    return lv


def list_bulletins(db: Session, *, active: Optional[bool] = True) -> list[Bulletin]:
    stmt = select(Bulletin)
    if active is not None:
        stmt = stmt.where(Bulletin.is_active.is_(active))
    return list(db.scalars(stmt.order_by(Bulletin.code)).all())


def create_bulletin(db: Session, *, p: Principal, payload: BulletinIn) -> Bulletin:
    _require(p, "can_access_settings")
    code = payload.code.strip().upper()
    if db.scalar(select(Bulletin).where(Bulletin.code == code)):
        raise HTTPException(status_code=409, detail=f"bulletin {code} already exists")
    row = Bulletin(
        code=code,
        title=payload.title.strip(),
        alert_level=_check_alert_level(payload.alert_level),
        organization=payload.organization,
        document_url=payload.document_url,
        is_active=payload.is_active,
    )
    db.add(row)
    db.flush()
    audit_write(db, actor_email=p.email, action="bulletin.create", entity_type="bulletin", entity_id=row.id, after={"code": code})
    db.commit()
    db.refresh(row)
    return row


def bulk_upsert_bulletins(db: Session, *, p: Principal, rows: list[BulletinIn]) -> dict[str, Any]:
    _require(p, "can_access_settings")
    created = updated = 0
    errors: list[str] = []
    for idx, row in enumerate(rows, start=1):
        code = row.code.strip().upper()
        try:
            level = _check_alert_level(row.alert_level)
        except HTTPException as e:
            errors.append(f"row {idx}: {e.detail}")
            continue
        b = db.scalar(select(Bulletin).where(Bulletin.code == code))
        if b is None:
            db.add(
                Bulletin(
                    code=code,
                    title=row.title.strip(),
                    alert_level=level,
                    organization=row.organization,
                    document_url=row.document_url,
                    is_active=row.is_active,
                )
            )
            created += 1
        else:
            b.title = row.title.strip()
            b.alert_level = level
            b.organization = row.organization
            b.document_url = row.document_url
            b.is_active = row.is_active
            updated += 1
        db.flush()

    audit_write(
        db,
        actor_email=p.email,
        action="bulletin.bulk_upsert",
        entity_type="bulletin",
        entity_id="bulk",
        after={"created": created, "updated": updated},
    )
    db.commit()
    return {"created": created, "updated": updated, "stations_created": [], "errors": errors}
