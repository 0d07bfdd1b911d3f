# backend/inspector360/domain/audit.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..models import AuditEvent, station_now

log = logging.getLogger("inspector360.audit")


def _as_json(payload: Optional[dict[str, Any]]) -> Optional[str]:
    # dates and enums are stored as their string form
    return None if payload is None else json.dumps(payload, sort_keys=True, default=str)


def audit_write(
    db: Session,
    *,
    actor_email: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Any,
    station: Optional[str] = None,
    before: Optional[dict[str, Any]] = None,
    after: Optional[dict[str, Any]] = None,
    commit: bool = False,
) -> AuditEvent:
    """
    Records who changed what (inspection.create, inspection.complete, talk.execution.create, ...).

    The row joins the caller's transaction; pass commit=True only for standalone writes.
    """
    event = AuditEvent(
        actor_email=actor_email,
        station=station,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        before_json=_as_json(before),
        after_json=_as_json(after),
        created_at=station_now(),
    )
    db.add(event)
    log.debug("%s %s:%s", action, entity_type, entity_id, extra={"user_email": actor_email, "station": station})

    if commit:
        db.commit()
        db.refresh(event)
    return event
