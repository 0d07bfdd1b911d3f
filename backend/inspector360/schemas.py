# backend/inspector360/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, List

from pydantic import BaseModel, Field, ConfigDict


# -------------------- Stations --------------------

class StationUpsert(BaseModel):
    code: str = Field(min_length=3, max_length=10)
    name: str = Field(min_length=1)
    address: Optional[str] = None
    ruc: Optional[str] = None
    legal_name: Optional[str] = None
    is_active: bool = True


class StationOut(BaseModel):
    code: str
    name: str
    address: Optional[str] = None
    ruc: Optional[str] = None
    legal_name: Optional[str] = None
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


# -------------------- Inspections --------------------

class InspectionCreate(BaseModel):
    station: str
    inspection_date: date
    inspection_type: str  # inicial|periodica|post_mantenimiento
    inspector_name: str
    additional_comments: Optional[str] = None


class InspectionUpdate(BaseModel):
    inspection_date: Optional[date] = None
    inspection_type: Optional[str] = None
    inspector_name: Optional[str] = None
    supervisor_name: Optional[str] = None
    mechanic_name: Optional[str] = None
    additional_comments: Optional[str] = None


class EquipmentIn(BaseModel):
    code: str
    type: str
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    serial_number: Optional[str] = None
    motor_serial: Optional[str] = None
    equipment_master_id: Optional[int] = None
    # {item_code: {"status": conforme|no_conforme|no_aplica|null, "observations": str}}
    checklist_data: dict[str, dict[str, Any]] = Field(default_factory=dict)
    order_index: Optional[int] = None
    inspector_signature_url: Optional[str] = None


class EquipmentOut(BaseModel):
    id: int
    inspection_id: int
    code: str
    type: str
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    serial_number: Optional[str] = None
    motor_serial: Optional[str] = None
    station: Optional[str] = None
    checklist_data: dict[str, Any]
    order_index: int
    inspector_signature_url: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class ObservationIn(BaseModel):
    equipment_code: str
    obs_operator: str = Field(min_length=1)
    obs_maintenance: Optional[str] = None


class ObservationAnswer(BaseModel):
    obs_maintenance: str = Field(min_length=1)


class ObservationOut(BaseModel):
    id: Optional[int] = None
    obs_id: str
    equipment_code: str
    obs_operator: str
    obs_maintenance: Optional[str] = None
    order_index: int
    model_config = ConfigDict(from_attributes=True)


class CompleteIn(BaseModel):
    supervisor_name: str = Field(min_length=1)
    supervisor_signature_url: str = Field(min_length=1)
    mechanic_name: Optional[str] = None
    mechanic_signature_url: Optional[str] = None
    additional_comments: Optional[str] = None


class InspectionOut(BaseModel):
    id: int
    form_code: Optional[str] = None
    station: str
    inspection_date: date
    inspection_type: str
    inspector_name: str
    supervisor_name: Optional[str] = None
    supervisor_signature_url: Optional[str] = None
    supervisor_signature_date: Optional[datetime] = None
    mechanic_name: Optional[str] = None
    mechanic_signature_url: Optional[str] = None
    mechanic_signature_date: Optional[datetime] = None
    additional_comments: Optional[str] = None
    status: str
    user_email: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class InspectionDetailOut(InspectionOut):
    equipment: List[EquipmentOut] = Field(default_factory=list)
    observations: List[ObservationOut] = Field(default_factory=list)
    observations_derived: bool = False
    missing_signatures: List[str] = Field(default_factory=list)
    missing_signatures_label: Optional[str] = None
    needs_attention: bool = False


class InspectionPageOut(BaseModel):
    items: List[InspectionOut]
    total: int
    page: int
    page_size: int


class UniqueNamesOut(BaseModel):
    equipment_codes: List[str]
    inspectors: List[str]
    supervisors: List[str]
    mechanics: List[str]


class ChecklistItemOut(BaseModel):
    code: str
    category: str
    description: str
    order_index: int
    model_config = ConfigDict(from_attributes=True)


class ApplicableChecklistOut(BaseModel):
    equipment_code: str
    equipment_class: str
    equipment_tag: str
    items: List[ChecklistItemOut]


class ChecklistCategoryOut(BaseModel):
    category: str
    label: str
    items: List[ChecklistItemOut]


# -------------------- Maintenance --------------------

class StatusCorrectionOut(BaseModel):
    inspection_id: int
    form_code: Optional[str] = None
    current: Optional[str] = None
    correct: str


class StatusCorrectionReport(BaseModel):
    scanned: int
    corrections: List[StatusCorrectionOut]
    applied: bool = False


# -------------------- Safety talks --------------------

class EmployeeIn(BaseModel):
    dni: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    position: Optional[str] = None
    area: Optional[str] = None
    station_code: str
    is_active: bool = True


class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = None
    position: Optional[str] = None
    area: Optional[str] = None
    station_code: Optional[str] = None
    is_active: Optional[bool] = None


class EmployeeOut(BaseModel):
    id: int
    dni: str
    full_name: str
    position: Optional[str] = None
    area: Optional[str] = None
    station_code: str
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class BulletinIn(BaseModel):
    code: str = Field(min_length=1)
    title: str = Field(min_length=1)
    alert_level: str = "VERDE"  # ROJA|AMBAR|VERDE
    organization: Optional[str] = None
    document_url: Optional[str] = None
    is_active: bool = True


class BulletinOut(BaseModel):
    id: int
    code: str
    title: str
    alert_level: str
    organization: Optional[str] = None
    document_url: Optional[str] = None
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class TalkScheduleIn(BaseModel):
    scheduled_date: date
    bulletin_id: int
    station_code: Optional[str] = None
    is_mandatory: bool = False


class TalkScheduleOut(BaseModel):
    id: int
    scheduled_date: date
    bulletin_id: int
    station_code: Optional[str] = None
    is_mandatory: bool
    is_completed: bool
    bulletin: Optional[BulletinOut] = None
    model_config = ConfigDict(from_attributes=True)


class AttendeeIn(BaseModel):
    employee_id: int
    signature: Optional[str] = None
    attended: bool = True


class AttendeeOut(BaseModel):
    id: int
    employee_id: int
    signature: Optional[str] = None
    attended: bool
    model_config = ConfigDict(from_attributes=True)


class TalkExecutionIn(BaseModel):
    station_code: str
    schedule_id: Optional[int] = None
    bulletin_id: Optional[int] = None
    executed_at: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_min: Optional[int] = None
    presenter_id: int
    presenter_signature: Optional[str] = None
    activity_type: Optional[str] = None
    observations: Optional[str] = None
    attendees: List[AttendeeIn] = Field(default_factory=list)


class TalkExecutionOut(BaseModel):
    id: int
    schedule_id: Optional[int] = None
    bulletin_id: Optional[int] = None
    station_code: str
    executed_at: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_min: Optional[int] = None
    scheduled_headcount: Optional[int] = None
    presenter_id: int
    activity_type: Optional[str] = None
    observations: Optional[str] = None
    attendees: List[AttendeeOut] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


class BulkResultOut(BaseModel):
    created: int
    updated: int
    stations_created: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
