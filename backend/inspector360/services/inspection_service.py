# backend/inspector360/services/inspection_service.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..auth import Principal, scope_station
from ..config import settings
from ..domain.audit import audit_write
from ..domain.lifecycle import derive_status, missing_signatures, missing_signatures_label, needs_attention
from ..domain.validation import (
    INSPECTION_TYPES,
    checklist_errors,
    completion_errors,
    general_data_errors,
    is_valid_equipment_code,
    is_valid_equipment_year,
    next_observation_id,
    normalize_equipment_code,
)
from ..models import Equipment, Inspection, Observation, station_now
from ..schemas import (
    CompleteIn,
    EquipmentIn,
    InspectionCreate,
    InspectionUpdate,
    ObservationAnswer,
    ObservationIn,
)
from .clock import station_today
from .ownership import must_get_active_station

log = logging.getLogger("inspector360.inspections")


def _require(p: Principal, flag: str) -> None:
    if not p.can(flag):
        raise HTTPException(status_code=403, detail=f"Role {p.role} lacks {flag}")


def _ensure_editable(p: Principal, insp: Inspection) -> None:
    # creators keep working on their own form even without the edit permission
    own = p.can("can_create_inspections") and (insp.user_email or "") == p.email
    if not own:
        _require(p, "can_edit_inspections")
    if insp.status == "completed" and p.role != "admin":
        raise HTTPException(status_code=409, detail="completed inspections are read-only")


def form_code_for(inspection_id: int) -> str:
    return f"{settings.form_code_prefix}-{int(inspection_id):06d}"


def _snapshot(insp: Inspection) -> dict[str, Any]:
    return {
        "form_code": insp.form_code,
        "station": insp.station,
        "inspection_date": insp.inspection_date,
        "inspection_type": insp.inspection_type,
        "inspector_name": insp.inspector_name,
        "status": insp.status,
    }


def recalc_status(insp: Inspection) -> str:
    """Re-runs the lifecycle classifier and stores the result. Returns the new status."""
    new_status = derive_status(insp).value
    if insp.status != new_status:
        log.info(
            "inspection status %s -> %s",
            insp.status,
            new_status,
            extra={"inspection_id": insp.id, "form_code": insp.form_code, "station": insp.station, "status": new_status},
        )
        insp.status = new_status
    return new_status


# -----------------------------
# Create / update
# -----------------------------
def create_inspection(db: Session, *, p: Principal, payload: InspectionCreate) -> Inspection:
    _require(p, "can_create_inspections")
    station = scope_station(p, payload.station) or ""

    errors = general_data_errors(
        inspection_date=payload.inspection_date,
        inspection_type=payload.inspection_type,
        inspector_name=payload.inspector_name,
        station=station,
        today=station_today(),
    )
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    must_get_active_station(db, code=station)

    insp = Inspection(
        station=station,
        inspection_date=payload.inspection_date,
        inspection_type=payload.inspection_type,
        inspector_name=payload.inspector_name.strip(),
        additional_comments=payload.additional_comments,
        user_email=p.email,
        status="draft",
    )
    db.add(insp)
    db.flush()
    insp.form_code = form_code_for(insp.id)

    audit_write(
        db,
        actor_email=p.email,
        action="inspection.create",
        entity_type="inspection",
        entity_id=insp.id,
        station=station,
        after=_snapshot(insp),
    )
    db.commit()
    db.refresh(insp)
    log.info("inspection created", extra={"inspection_id": insp.id, "form_code": insp.form_code, "station": station})
    return insp


def update_general(db: Session, *, p: Principal, insp: Inspection, payload: InspectionUpdate) -> Inspection:
    _ensure_editable(p, insp)
    before = _snapshot(insp)

    data = payload.model_dump(exclude_unset=True)
    for k, v in data.items():
        setattr(insp, k, v.strip() if isinstance(v, str) else v)

    errors = general_data_errors(
        inspection_date=insp.inspection_date,
        inspection_type=insp.inspection_type,
        inspector_name=insp.inspector_name,
        station=insp.station,
        today=station_today(),
    )
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    audit_write(
        db,
        actor_email=p.email,
        action="inspection.update",
        entity_type="inspection",
        entity_id=insp.id,
        station=insp.station,
        before=before,
        after=_snapshot(insp),
    )
    db.commit()
    db.refresh(insp)
    return insp


def _normalized_checklist(raw: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
    out: dict[str, dict[str, Any]] = {}
    for code, entry in (raw or {}).items():
        e = dict(entry or {})
        e["observations"] = (e.get("observations") or "").strip()
        out[str(code).strip().upper()] = e
    return out


def upsert_equipment(db: Session, *, p: Principal, insp: Inspection, payload: EquipmentIn) -> Equipment:
    """Adds the equipment row, or replaces it when the code is already on this inspection."""
    _ensure_editable(p, insp)

    code = normalize_equipment_code(payload.code)
    if not is_valid_equipment_code(code):
        raise HTTPException(status_code=422, detail=f"Formato inválido '{payload.code}'. Use: TLM-AR-001")
    if not is_valid_equipment_year(payload.year, station_today()):
        raise HTTPException(status_code=422, detail=f"Año inválido: {payload.year}")

    checklist = _normalized_checklist(payload.checklist_data)
    errors = checklist_errors(checklist)
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    eq = next((e for e in insp.equipment if e.code == code), None)
    if eq is None:
        if len(insp.equipment) >= settings.max_equipment_per_inspection:
            raise HTTPException(status_code=409, detail="equipment limit reached for this inspection")
        eq = Equipment(code=code, station=insp.station, order_index=len(insp.equipment))
        insp.equipment.append(eq)
        action = "inspection.equipment.add"
    else:
        action = "inspection.equipment.update"

    eq.type = payload.type.strip()
    eq.brand = payload.brand
    eq.model = payload.model
    eq.year = payload.year
    eq.serial_number = payload.serial_number
    eq.motor_serial = payload.motor_serial
    eq.equipment_master_id = payload.equipment_master_id
    eq.inspector_signature_url = payload.inspector_signature_url
    # new dict so the JSON column is flagged dirty
    eq.checklist_data = checklist
    if payload.order_index is not None:
        eq.order_index = payload.order_index

    recalc_status(insp)
    db.flush()
    audit_write(
        db,
        actor_email=p.email,
        action=action,
        entity_type="inspection",
        entity_id=insp.id,
        station=insp.station,
        after={"equipment_code": code, "status": insp.status},
    )
    db.commit()
    db.refresh(eq)
    return eq


def add_observation(db: Session, *, p: Principal, insp: Inspection, payload: ObservationIn) -> Observation:
    _ensure_editable(p, insp)

    code = normalize_equipment_code(payload.equipment_code)
    if code not in {e.code for e in insp.equipment}:
        raise HTTPException(status_code=422, detail=f"equipment {code} is not part of this inspection")

    obs = Observation(
        obs_id=next_observation_id(o.obs_id for o in insp.observations),
        equipment_code=code,
        obs_operator=payload.obs_operator.strip(),
        obs_maintenance=(payload.obs_maintenance or "").strip() or None,
        order_index=len(insp.observations),
    )
    insp.observations.append(obs)
    recalc_status(insp)
    db.flush()

    audit_write(
        db,
        actor_email=p.email,
        action="inspection.observation.add",
        entity_type="inspection",
        entity_id=insp.id,
        station=insp.station,
        after={"obs_id": obs.obs_id, "equipment_code": code, "status": insp.status},
    )
    db.commit()
    db.refresh(obs)
    return obs


def answer_observation(
    db: Session, *, p: Principal, insp: Inspection, obs_id: str, payload: ObservationAnswer
) -> Observation:
    _require(p, "can_edit_inspections")

    key = (obs_id or "").strip().upper()
    obs = next((o for o in insp.observations if o.obs_id == key), None)
    if obs is None:
        raise HTTPException(status_code=404, detail="observation not found")

    before = {"obs_maintenance": obs.obs_maintenance, "status": insp.status}
    obs.obs_maintenance = payload.obs_maintenance.strip()
    recalc_status(insp)

    audit_write(
        db,
        actor_email=p.email,
        action="inspection.observation.answer",
        entity_type="inspection",
        entity_id=insp.id,
        station=insp.station,
        before=before,
        after={"obs_id": obs.obs_id, "obs_maintenance": obs.obs_maintenance, "status": insp.status},
    )
    db.commit()
    db.refresh(obs)
    return obs


def complete_inspection(db: Session, *, p: Principal, insp: Inspection, payload: CompleteIn) -> Inspection:
    """
    Stores the sign-off and re-classifies. An inspection with unanswered
    observations stays pending even with the supervisor signature.
    """
    _ensure_editable(p, insp)

    errors = completion_errors(insp.equipment)
    if errors:
        raise HTTPException(status_code=409, detail=errors)

    before = _snapshot(insp)
    now = station_now()

    insp.supervisor_name = payload.supervisor_name.strip()
    insp.supervisor_signature_url = payload.supervisor_signature_url
    insp.supervisor_signature_date = now
    if payload.mechanic_name is not None:
        insp.mechanic_name = payload.mechanic_name.strip() or None
    if payload.mechanic_signature_url:
        insp.mechanic_signature_url = payload.mechanic_signature_url
        insp.mechanic_signature_date = now
    if payload.additional_comments is not None:
        insp.additional_comments = payload.additional_comments

    recalc_status(insp)

    audit_write(
        db,
        actor_email=p.email,
        action="inspection.complete",
        entity_type="inspection",
        entity_id=insp.id,
        station=insp.station,
        before=before,
        after=_snapshot(insp),
    )
    db.commit()
    db.refresh(insp)
    return insp


def delete_inspection(db: Session, *, p: Principal, insp: Inspection) -> None:
    _require(p, "can_delete_inspections")
    inspection_id, station = insp.id, insp.station
    audit_write(
        db,
        actor_email=p.email,
        action="inspection.delete",
        entity_type="inspection",
        entity_id=inspection_id,
        station=station,
        before=_snapshot(insp),
    )
    db.delete(insp)
    db.commit()
    log.info("inspection deleted", extra={"inspection_id": inspection_id, "station": station})


# -----------------------------
# Reads
# -----------------------------
def list_inspections(
    db: Session,
    *,
    p: Principal,
    station: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: Optional[int] = None,
) -> tuple[list[Inspection], int, int]:
    st = scope_station(p, station)
    size = max(1, min(int(page_size or settings.default_page_size), settings.max_page_size))
    page = max(1, int(page))

    stmt = select(Inspection)
    if st:
        stmt = stmt.where(Inspection.station == st)
    if status:
        stmt = stmt.where(Inspection.status == status)
    if date_from:
        stmt = stmt.where(Inspection.inspection_date >= date_from)
    if date_to:
        stmt = stmt.where(Inspection.inspection_date <= date_to)

    total = int(db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
    rows = db.scalars(
        stmt.order_by(Inspection.inspection_date.desc(), Inspection.id.desc())
        .offset((page - 1) * size)
        .limit(size)
    ).all()
    return list(rows), total, size


def derived_observations(insp: Inspection) -> list[dict[str, Any]]:
    """Display-only observations built from no_conforme checklist entries."""
    out: list[dict[str, Any]] = []
    for eq in insp.equipment:
        for idx, (code, entry) in enumerate((eq.checklist_data or {}).items()):
            if isinstance(entry, dict) and entry.get("status") == "no_conforme":
                out.append(
                    {
                        "obs_id": code,
                        "equipment_code": eq.code,
                        "obs_operator": entry.get("observations") or "",
                        "obs_maintenance": None,
                        "order_index": idx,
                    }
                )
    return out


def detail_payload(insp: Inspection) -> dict[str, Any]:
    stored = list(insp.observations)
    observations: list[Any] = stored or derived_observations(insp)
    return {
        **{c.name: getattr(insp, c.name) for c in Inspection.__table__.columns},
        "equipment": list(insp.equipment),
        "observations": observations,
        "observations_derived": not stored and bool(observations),
        "missing_signatures": missing_signatures(insp),
        "missing_signatures_label": missing_signatures_label(insp),
        "needs_attention": needs_attention(insp),
    }


def unique_names(db: Session, *, p: Principal, station: Optional[str] = None) -> dict[str, list[str]]:
    st = scope_station(p, station)

    def _distinct(col, *joins) -> list[str]:
        stmt = select(col).distinct()
        for j in joins:
            stmt = stmt.join(j)
        if st:
            stmt = stmt.where(Inspection.station == st)
        return sorted({str(v).strip() for v in db.scalars(stmt).all() if v and str(v).strip()})

    return {
        "equipment_codes": _distinct(Equipment.code, Equipment.inspection),
        "inspectors": _distinct(Inspection.inspector_name),
        "supervisors": _distinct(Inspection.supervisor_name),
        "mechanics": _distinct(Inspection.mechanic_name),
    }


def inspection_types() -> dict[str, str]:
    return dict(INSPECTION_TYPES)
