# backend/inspector360/routers/compliance.py
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal, scope_station
from ..config import settings
from ..db import get_db
from ..domain.compliance import Period
from ..services import compliance_service as svc

router = APIRouter(prefix="/compliance", tags=["compliance"])


class PeriodParams:
    def __init__(
        self,
        start: Optional[date] = Query(default=None),
        end: Optional[date] = Query(default=None),
        month: Optional[str] = Query(default=None, description="YYYY-MM"),
    ):
        self.start = start
        self.end = end
        self.month = month

    def resolve(self) -> Period:
        return svc.resolve_period(start=self.start, end=self.end, month=self.month)


def _station(p: Principal, station: Optional[str]) -> Optional[str]:
    return scope_station(p, station)


@router.get("/overall", response_model=dict)
def overall(
    station: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
) -> dict[str, Any]:
    return svc.overall(db, station=_station(p, station))


@router.get("/breakdown", response_model=dict)
def breakdown(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
) -> dict[str, Any]:
    return svc.breakdown(db, station=_station(p, station), period=period.resolve())


@router.get("/by-category", response_model=dict)
def by_category(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
) -> dict[str, Any]:
    return svc.breakdown(db, station=_station(p, station), period=period.resolve())["by_category"]


@router.get("/top-issues", response_model=list)
def top_issues(
    station: Optional[str] = Query(default=None),
    limit: int = Query(default=settings.top_issues_limit, ge=0, le=100),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.issues(db, station=_station(p, station), period=period.resolve(), limit=limit)


@router.get("/problematic-equipment", response_model=list)
def problematic_equipment(
    station: Optional[str] = Query(default=None),
    limit: int = Query(default=10, ge=0, le=100),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.equipment_ranking(db, station=_station(p, station), period=period.resolve(), limit=limit)


@router.get("/daily", response_model=dict)
def daily(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
) -> dict[str, Any]:
    return svc.daily(db, station=_station(p, station), period=period.resolve())


@router.get("/trends", response_model=dict)
def trends(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
) -> dict[str, Any]:
    return svc.trends(db, station=_station(p, station), period=period.resolve())


@router.get("/monthly", response_model=list)
def monthly(
    station: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.monthly(db, station=_station(p, station))


@router.get("/stations", response_model=list)
def stations(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.station_ranking(db, station=_station(p, station), period=period.resolve())


@router.get("/stations/daily", response_model=list)
def stations_daily(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return svc.station_heatmap(db, station=_station(p, station), period=period.resolve())


@router.get("/en-equipment", response_model=dict)
def en_equipment(
    station: Optional[str] = Query(default=None),
    period: PeriodParams = Depends(),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
) -> dict[str, Any]:
    return svc.en_equipment(db, station=_station(p, station), period=period.resolve())
