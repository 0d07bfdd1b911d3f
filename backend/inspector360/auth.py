# backend/inspector360/auth.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import jwt  # PyJWT
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .models import AppUser

ROLES: tuple[str, ...] = ("admin", "supervisor", "inspector", "sig", "operador", "mecanico")

@dataclass(frozen=True)
class RolePermissions:
    can_manage_users: bool = False
    can_manage_employees: bool = False
    can_view_all_stations: bool = False
    can_create_inspections: bool = False
    can_edit_inspections: bool = False
    can_delete_inspections: bool = False
    can_export_reports: bool = False
    can_access_settings: bool = False


ROLE_PERMISSIONS: dict[str, RolePermissions] = {
    "admin": RolePermissions(
        can_manage_users=True,
        can_manage_employees=True,
        can_view_all_stations=True,
        can_create_inspections=True,
        can_edit_inspections=True,
        can_delete_inspections=True,
        can_export_reports=True,
        can_access_settings=True,
    ),
    "supervisor": RolePermissions(
        can_manage_employees=True,  # own station only
        can_create_inspections=True,
        can_edit_inspections=True,
        can_export_reports=True,
        can_access_settings=True,
    ),
    "inspector": RolePermissions(can_create_inspections=True),
    "sig": RolePermissions(can_view_all_stations=True, can_export_reports=True),
    "operador": RolePermissions(can_create_inspections=True, can_edit_inspections=True, can_export_reports=True),
    "mecanico": RolePermissions(can_create_inspections=True, can_edit_inspections=True, can_export_reports=True),
}


@dataclass(frozen=True)
class Principal:
    email: str
    role: str  # admin | supervisor | inspector | sig | operador | mecanico
    station: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def permissions(self) -> RolePermissions:
        return ROLE_PERMISSIONS.get(self.role, RolePermissions())

    def can(self, flag: str) -> bool:
        return bool(getattr(self.permissions, flag, False))


def scope_station(p: Principal, requested: Optional[str]) -> Optional[str]:
    """
    Station filter a principal may use.
      - all-stations roles: whatever was requested (None = every station)
      - everyone else: forced onto their own station; asking for another one is 403
    """
    req = (requested or "").strip().upper() or None
    if p.can("can_view_all_stations"):
        return req

    own = (p.station or "").strip().upper()
    if not own:
        raise HTTPException(status_code=403, detail="User has no station assigned")
    if req and req != own:
        raise HTTPException(status_code=403, detail=f"Not allowed to access station {req}")
    return own


def ensure_station_access(p: Principal, station: Optional[str]) -> None:
    scope_station(p, station)


# -------------------------
# Identity resolution
# -------------------------
def _get_user_by_email(db: Session, email: str) -> AppUser | None:
    return db.scalar(select(AppUser).where(AppUser.email == email))


def _decode_supabase_token(token: str) -> dict[str, Any]:
    if not settings.supabase_jwt_secret:
        raise HTTPException(status_code=500, detail="supabase_jwt_secret not configured")
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=settings.supabase_jwt_audience,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def _principal_from_profile(user: AppUser) -> Principal:
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User is inactive")
    return Principal(
        email=str(user.email),
        role=str(user.role),
        station=(user.station or None),
        full_name=user.full_name,
    )


def get_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Auth modes:
      1) jwt: Authorization: Bearer <Supabase access token>; role/station come from app_users
      2) dev: X-User-Email / X-User-Role / X-User-Station headers (a stored profile wins)
    """
    mode = (settings.auth_mode or "dev").strip().lower()

    if mode == "jwt":
        if not authorization or not str(authorization).lower().startswith("bearer "):
            raise HTTPException(status_code=401, detail="Not authenticated")
        claims = _decode_supabase_token(str(authorization).split(" ", 1)[1].strip())
        email = str(claims.get("email") or "").strip().lower()
        if not email:
            raise HTTPException(status_code=401, detail="Token missing email")
        user = _get_user_by_email(db, email)
        if user is None:
            raise HTTPException(status_code=403, detail="No profile for this user")
        return _principal_from_profile(user)

    email = (request.headers.get(settings.dev_header_user_email) or "").strip().lower()
    if not email:
        raise HTTPException(status_code=401, detail=f"Missing {settings.dev_header_user_email} for dev auth")

    user = _get_user_by_email(db, email)
    if user is not None:
        return _principal_from_profile(user)

    role = (request.headers.get(settings.dev_header_user_role) or "inspector").strip().lower()
    if role not in ROLE_PERMISSIONS:
        raise HTTPException(status_code=401, detail=f"Unknown role {role}")
    station = (request.headers.get(settings.dev_header_user_station) or "").strip().upper() or None
    return Principal(email=email, role=role, station=station)


def require_admin(p: Principal = Depends(get_principal)) -> Principal:
    if p.role != "admin":
        raise HTTPException(status_code=403, detail="Requires role admin")
    return p
