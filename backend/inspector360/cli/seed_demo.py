# backend/inspector360/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from inspector360.db import Base, SessionLocal, engine
from inspector360.models import AppUser, Bulletin, EquipmentMaster, Station

STATIONS: dict[str, str] = {
    "AQP": "Arequipa",
    "CUZ": "Cusco",
    "CIX": "Chiclayo",
    "TRU": "Trujillo",
    "CJA": "Cajamarca",
    "TPP": "Tarapoto",
    "PIU": "Piura",
}

# (suffix, type) per station: TLM-<suffix>-001
FLEET: tuple[tuple[str, str], ...] = (
    ("FT", "Tractor de remolque"),
    ("PM", "Plataforma motorizada"),
    ("EM", "Escalera motorizada"),
    ("EN", "Escalera manual"),
    ("AR", "Arrancador neumático"),
)


@dataclass(frozen=True)
class SeedResult:
    stations: int
    equipment: int
    admin_email: str


def _get_or_create_station(db: Session, code: str, name: str) -> Station:
    row = db.get(Station, code)
    if row:
        return row
    row = Station(code=code, name=name)
    db.add(row)
    return row


def _get_or_create_user(db: Session, email: str, full_name: str, role: str, station: str | None) -> AppUser:
    row = db.query(AppUser).filter(AppUser.email == email).one_or_none()
    if row:
        return row
    row = AppUser(email=email, full_name=full_name, role=role, station=station)
    db.add(row)
    return row


def seed_demo(*, admin_email: str = "admin@inspector360.local", create_schema: bool = True) -> SeedResult:
    if create_schema:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        for code, name in STATIONS.items():
            _get_or_create_station(db, code, name)

        _get_or_create_user(db, admin_email, "Administrador", "admin", None)
        for code in STATIONS:
            _get_or_create_user(db, f"supervisor.{code.lower()}@inspector360.local", f"Supervisor {code}", "supervisor", code)

        n_eq = 0
        for idx, code in enumerate(STATIONS, start=1):
            for suffix, eq_type in FLEET:
                eq_code = f"TLM-{suffix}-{idx:03d}"
                if db.query(EquipmentMaster).filter(EquipmentMaster.code == eq_code).one_or_none():
                    continue
                db.add(EquipmentMaster(code=eq_code, station=code, type=eq_type))
                n_eq += 1

        if not db.query(Bulletin).filter(Bulletin.code == "BOL-001").one_or_none():
            db.add(Bulletin(code="BOL-001", title="Uso de calzas en rampa", alert_level="AMBAR"))

        db.commit()
        return SeedResult(stations=len(STATIONS), equipment=n_eq, admin_email=admin_email)
    finally:
        db.close()
