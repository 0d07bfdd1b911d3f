# backend/inspector360/domain/lifecycle.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional


class InspectionStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    COMPLETED = "completed"


def get_field(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _has_text(v: Any) -> bool:
    return isinstance(v, str) and len(v.strip()) > 0


def has_signature(url: Optional[str]) -> bool:
    return _has_text(url)


def is_unanswered(observation: Any) -> bool:
    """Operator wrote something and maintenance has not answered yet."""
    return _has_text(get_field(observation, "obs_operator")) and not _has_text(
        get_field(observation, "obs_maintenance")
    )


def has_pending_observations(observations: Optional[Iterable[Any]]) -> bool:
    return any(is_unanswered(o) for o in (observations or []))


def classify_status(
    has_equipment: bool,
    has_supervisor_signature: bool,
    has_unanswered_observation: bool,
) -> InspectionStatus:
    """
    Lifecycle state from current facts, highest priority first:
      1) unanswered operator observation -> pending
      2) supervisor signature            -> completed
      3) at least one equipment row      -> pending
      4) otherwise                       -> draft

    The mechanic signature never gates completion.
    """
    if has_unanswered_observation:
        return InspectionStatus.PENDING
    if has_supervisor_signature:
        return InspectionStatus.COMPLETED
    if has_equipment:
        return InspectionStatus.PENDING
    return InspectionStatus.DRAFT


def derive_status(record: Any) -> InspectionStatus:
    """
    Works with:
      - Inspection ORM rows (equipment / observations relationships loaded)
      - dicts shaped like the backend select:
        {status, supervisor_signature_url, equipment: [...], observations: [...]}
    Only reads presence/absence.
    """
    equipment = get_field(record, "equipment") or []
    observations = get_field(record, "observations") or []
    return classify_status(
        has_equipment=len(list(equipment)) > 0,
        has_supervisor_signature=has_signature(get_field(record, "supervisor_signature_url")),
        has_unanswered_observation=has_pending_observations(observations),
    )


def missing_signatures(record: Any) -> list[str]:
    out: list[str] = []
    if not has_signature(get_field(record, "supervisor_signature_url")):
        out.append("supervisor")
    if not has_signature(get_field(record, "mechanic_signature_url")):
        out.append("mechanic")
    return out


_ROLE_LABELS = {"supervisor": "supervisor", "mechanic": "mecánico"}


def missing_signatures_label(record: Any) -> Optional[str]:
    missing = missing_signatures(record)
    if not missing:
        return None
    labels = [_ROLE_LABELS[m] for m in missing]
    if len(labels) == 1:
        return f"Falta firma de {labels[0]}"
    return f"Falta firma de {labels[0]} y {labels[1]}"


def needs_attention(record: Any) -> bool:
    """Pending review on dashboards: open observations or any signature missing."""
    return has_pending_observations(get_field(record, "observations")) or bool(missing_signatures(record))


@dataclass(frozen=True)
class StatusCorrection:
    inspection_id: Any
    form_code: Optional[str]
    current: Optional[str]
    correct: InspectionStatus


def plan_status_corrections(records: Iterable[Any]) -> list[StatusCorrection]:
    """Rows whose persisted status differs from the derived one. Safe to rerun."""
    out: list[StatusCorrection] = []
    for r in records:
        correct = derive_status(r)
        current = get_field(r, "status")
        if str(current or "") != correct.value:
            out.append(
                StatusCorrection(
                    inspection_id=get_field(r, "id"),
                    form_code=get_field(r, "form_code"),
                    current=current,
                    correct=correct,
                )
            )
    return out
