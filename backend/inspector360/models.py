# backend/inspector360/models.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .config import settings
from .db import Base


def station_now() -> datetime:
    """Station wall-clock time. Stored naive so SQLite and Postgres read back the same local day."""
    return datetime.now(ZoneInfo(settings.station_timezone)).replace(tzinfo=None)


# -----------------------------
# Stations / users
# -----------------------------
class Station(Base):
    __tablename__ = "stations"

    code: Mapped[str] = mapped_column(String(10), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ruc: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    legal_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)


class AppUser(Base):
    """Profile row for an identity managed by the auth provider."""

    __tablename__ = "app_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="inspector")
    station: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    actor_email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    station: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, index=True)

    action: Mapped[str] = mapped_column(String(80), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(80), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(80), nullable=False)

    before_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    after_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)


# -----------------------------
# Inspections (FOR-ATA-057)
# -----------------------------
class Inspection(Base):
    __tablename__ = "inspections"
    __table_args__ = (Index("ix_inspections_station_date", "station", "inspection_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    form_code: Mapped[Optional[str]] = mapped_column(String(40), nullable=True, unique=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)

    station: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    inspection_date: Mapped[date] = mapped_column(Date, nullable=False)
    inspection_type: Mapped[str] = mapped_column(String(30), nullable=False)  # inicial|periodica|post_mantenimiento
    inspector_name: Mapped[str] = mapped_column(String(160), nullable=False)

    supervisor_name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    supervisor_signature_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    supervisor_signature_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    mechanic_name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    mechanic_signature_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mechanic_signature_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    additional_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)  # draft|pending|completed

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now, onupdate=station_now)

    equipment: Mapped[List["Equipment"]] = relationship(
        back_populates="inspection", cascade="all, delete-orphan", order_by="Equipment.order_index"
    )
    observations: Mapped[List["Observation"]] = relationship(
        back_populates="inspection", cascade="all, delete-orphan", order_by="Observation.order_index"
    )


class Equipment(Base):
    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inspection_id: Mapped[int] = mapped_column(
        ForeignKey("inspections.id", ondelete="CASCADE"), index=True, nullable=False
    )
    equipment_master_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("equipment_master.id", ondelete="SET NULL"), nullable=True
    )

    code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(80), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    serial_number: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    motor_serial: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    station: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    # {item_code: {"status": conforme|no_conforme|no_aplica|null, "observations": str}}
    checklist_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inspector_signature_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)

    inspection: Mapped["Inspection"] = relationship(back_populates="equipment")


class Observation(Base):
    __tablename__ = "observations"
    __table_args__ = (UniqueConstraint("inspection_id", "obs_id", name="uq_observations_inspection_obs"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inspection_id: Mapped[int] = mapped_column(
        ForeignKey("inspections.id", ondelete="CASCADE"), index=True, nullable=False
    )
    obs_id: Mapped[str] = mapped_column(String(20), nullable=False)  # OBS-001
    equipment_code: Mapped[str] = mapped_column(String(20), nullable=False)
    obs_operator: Mapped[str] = mapped_column(Text, nullable=False)
    obs_maintenance: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now, onupdate=station_now)

    inspection: Mapped["Inspection"] = relationship(back_populates="observations")


class EquipmentMaster(Base):
    """Fleet registry per station."""

    __tablename__ = "equipment_master"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)
    station: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(80), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    serial_number: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    motor_serial: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


# -----------------------------
# Safety talks
# -----------------------------
class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    dni: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    area: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    station_code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now, onupdate=station_now)


class Bulletin(Base):
    __tablename__ = "bulletins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    alert_level: Mapped[str] = mapped_column(String(10), nullable=False, default="VERDE")  # ROJA|AMBAR|VERDE
    organization: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    document_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)


class TalkSchedule(Base):
    __tablename__ = "talk_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    bulletin_id: Mapped[int] = mapped_column(ForeignKey("bulletins.id", ondelete="CASCADE"), nullable=False)
    station_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # null = every station
    is_mandatory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    bulletin: Mapped["Bulletin"] = relationship()


class TalkExecution(Base):
    __tablename__ = "talk_executions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    schedule_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("talk_schedules.id", ondelete="SET NULL"), nullable=True, index=True
    )
    bulletin_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("bulletins.id", ondelete="SET NULL"), nullable=True
    )
    station_code: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    executed_at: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)  # HH:MM
    end_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    duration_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    scheduled_headcount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    presenter_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False)
    presenter_signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    activity_type: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    observations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)

    attendees: Mapped[List["TalkAttendee"]] = relationship(
        back_populates="talk", cascade="all, delete-orphan"
    )


class TalkAttendee(Base):
    __tablename__ = "talk_attendees"
    __table_args__ = (UniqueConstraint("talk_id", "employee_id", name="uq_talk_attendees_talk_employee"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    talk_id: Mapped[int] = mapped_column(ForeignKey("talk_executions.id", ondelete="CASCADE"), nullable=False)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False)
    signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    attended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=station_now)

    talk: Mapped["TalkExecution"] = relationship(back_populates="attendees")
