# backend/inspector360/routers/maintenance.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Principal, require_admin
from ..db import get_db
from ..schemas import StatusCorrectionReport
from ..services.status_backfill import (
    apply_status_corrections,
    corrections_as_dicts,
    preview_status_corrections,
)

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.get("/status-corrections", response_model=StatusCorrectionReport)
def preview(db: Session = Depends(get_db), p: Principal = Depends(require_admin)):
    scanned, corrections = preview_status_corrections(db)
    return {"scanned": scanned, "corrections": corrections_as_dicts(corrections), "applied": False}


@router.post("/status-corrections", response_model=StatusCorrectionReport)
def apply(db: Session = Depends(get_db), p: Principal = Depends(require_admin)):
    scanned, corrections = apply_status_corrections(db, actor_email=p.email)
    return {"scanned": scanned, "corrections": corrections_as_dicts(corrections), "applied": True}
