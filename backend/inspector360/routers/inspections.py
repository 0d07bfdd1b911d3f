# backend/inspector360/routers/inspections.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..domain.checklist import (
    CHECKLIST_CATEGORIES,
    CHECKLIST_TEMPLATE,
    FOR_ATA_057_ITEMS,
    applicable_items,
    equipment_profile,
    grouped_by_category,
)
from ..domain.validation import is_valid_equipment_code, normalize_equipment_code
from ..schemas import (
    ApplicableChecklistOut,
    ChecklistCategoryOut,
    ChecklistItemOut,
    CompleteIn,
    EquipmentIn,
    EquipmentOut,
    InspectionCreate,
    InspectionDetailOut,
    InspectionOut,
    InspectionPageOut,
    InspectionUpdate,
    ObservationAnswer,
    ObservationIn,
    ObservationOut,
    UniqueNamesOut,
)
from ..services import inspection_service as svc
from ..services.ownership import must_get_inspection

router = APIRouter(prefix="/inspections", tags=["inspections"])


# -----------------------------
# Reference data
# -----------------------------
@router.get("/checklist/template", response_model=list[ChecklistItemOut])
def checklist_template(form: str = Query(default="for-ata-057", pattern="^(for-ata-057|full)$")):
    """FOR-ATA-057 field items (default) or the full 50-item categorized template."""
    return list(FOR_ATA_057_ITEMS if form == "for-ata-057" else CHECKLIST_TEMPLATE)


@router.get("/checklist/categories", response_model=list[ChecklistCategoryOut])
def checklist_categories():
    return [
        {"category": category, "label": CHECKLIST_CATEGORIES[category], "items": items}
        for category, items in grouped_by_category().items()
    ]


@router.get("/checklist/applicable", response_model=ApplicableChecklistOut)
def applicable_checklist(equipment_code: str = Query(...)):
    code = normalize_equipment_code(equipment_code)
    if not is_valid_equipment_code(code):
        raise HTTPException(status_code=422, detail=f"Formato inválido '{equipment_code}'. Use: TLM-AR-001")
    profile = equipment_profile(code)
    return {
        "equipment_code": code,
        "equipment_class": profile.equipment_class.value,
        "equipment_tag": profile.prefix,
        "items": applicable_items(code),
    }


@router.get("/types", response_model=dict)
def inspection_types():
    return svc.inspection_types()


@router.get("/names", response_model=UniqueNamesOut)
def unique_names(
    station: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.unique_names(db, p=p, station=station)


# -----------------------------
# Inspections
# -----------------------------
@router.get("", response_model=InspectionPageOut)
def list_inspections(
    station: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None, pattern="^(draft|pending|completed)$"),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    rows, total, size = svc.list_inspections(
        db,
        p=p,
        station=station,
        status=status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )
    return {"items": rows, "total": total, "page": page, "page_size": size}


@router.post("", response_model=InspectionOut, status_code=201)
def create_inspection(
    payload: InspectionCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.create_inspection(db, p=p, payload=payload)


@router.get("/{inspection_id}", response_model=InspectionDetailOut)
def get_inspection(
    inspection_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    return svc.detail_payload(insp)


@router.patch("/{inspection_id}", response_model=InspectionOut)
def update_inspection(
    inspection_id: int,
    payload: InspectionUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    return svc.update_general(db, p=p, insp=insp, payload=payload)


@router.put("/{inspection_id}/equipment", response_model=EquipmentOut)
def upsert_equipment(
    inspection_id: int,
    payload: EquipmentIn,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    return svc.upsert_equipment(db, p=p, insp=insp, payload=payload)


@router.post("/{inspection_id}/observations", response_model=ObservationOut, status_code=201)
def add_observation(
    inspection_id: int,
    payload: ObservationIn,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    return svc.add_observation(db, p=p, insp=insp, payload=payload)


@router.post("/{inspection_id}/observations/{obs_id}/answer", response_model=ObservationOut)
def answer_observation(
    inspection_id: int,
    obs_id: str,
    payload: ObservationAnswer,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    return svc.answer_observation(db, p=p, insp=insp, obs_id=obs_id, payload=payload)


@router.post("/{inspection_id}/complete", response_model=InspectionOut)
def complete_inspection(
    inspection_id: int,
    payload: CompleteIn,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    return svc.complete_inspection(db, p=p, insp=insp, payload=payload)


@router.delete("/{inspection_id}", status_code=204)
def delete_inspection(
    inspection_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    insp = must_get_inspection(db, p=p, inspection_id=inspection_id)
    svc.delete_inspection(db, p=p, insp=insp)
