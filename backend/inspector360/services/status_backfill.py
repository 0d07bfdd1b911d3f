# backend/inspector360/services/status_backfill.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..domain.audit import audit_write
from ..domain.lifecycle import StatusCorrection, plan_status_corrections
from ..models import Inspection

log = logging.getLogger("inspector360.backfill")


def _load_all(db: Session) -> list[Inspection]:
    stmt = (
        select(Inspection)
        .options(selectinload(Inspection.equipment), selectinload(Inspection.observations))
        .order_by(Inspection.id)
    )
    return list(db.scalars(stmt).all())


def preview_status_corrections(db: Session) -> tuple[int, list[StatusCorrection]]:
    rows = _load_all(db)
    return len(rows), plan_status_corrections(rows)


def apply_status_corrections(db: Session, *, actor_email: str | None = None) -> tuple[int, list[StatusCorrection]]:
    """
    Re-classifies every stored inspection. Idempotent: a second run finds nothing to fix.
    """
    rows = _load_all(db)
    by_id = {r.id: r for r in rows}
    corrections = plan_status_corrections(rows)

    for c in corrections:
        insp = by_id[c.inspection_id]
        insp.status = c.correct.value
        audit_write(
            db,
            actor_email=actor_email,
            action="inspection.status_correction",
            entity_type="inspection",
            entity_id=c.inspection_id,
            station=insp.station,
            before={"status": c.current},
            after={"status": c.correct.value},
        )
        log.info(
            "status corrected %s -> %s",
            c.current,
            c.correct.value,
            extra={"inspection_id": c.inspection_id, "form_code": c.form_code, "station": insp.station},
        )

    db.commit()
    return len(rows), corrections


def corrections_as_dicts(corrections: list[StatusCorrection]) -> list[dict[str, Any]]:
    return [
        {
            "inspection_id": c.inspection_id,
            "form_code": c.form_code,
            "current": c.current,
            "correct": c.correct.value,
        }
        for c in corrections
    ]
