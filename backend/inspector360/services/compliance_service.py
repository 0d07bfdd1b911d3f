# backend/inspector360/services/compliance_service.py
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..config import settings
from ..domain.compliance import (
    Period,
    current_month_period,
    daily_compliance,
    en_equipment_heatmap,
    en_equipment_stats,
    month_period,
    monthly_trends,
    outcome_breakdown,
    overall_stats,
    problematic_equipment,
    station_compliance_status,
    station_daily_status,
    top_issues,
    trend_series,
)
from ..domain.compliance.compliance_stats import equipment_of
from ..domain.compliance.period import completed_in_period
from ..models import EquipmentMaster, Inspection, Station
from .clock import station_today, station_tz


def resolve_period(
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    month: Optional[str] = None,
    today: Optional[date] = None,
) -> Period:
    """
    month=YYYY-MM wins; otherwise start..end (end defaults to today);
    nothing given -> the current calendar month.
    """
    today = today or station_today()
    if month:
        try:
            return month_period(month)
        except ValueError:
            raise HTTPException(status_code=422, detail=f"invalid month '{month}', expected YYYY-MM")
    if start is None and end is None:
        return current_month_period(today)
    if start is None:
        raise HTTPException(status_code=422, detail="start is required when end is given")
    period = Period(start, end or today)
    if period.end < period.start:
        raise HTTPException(status_code=422, detail="end must not be before start")
    if period.days_in_period > settings.max_period_days:
        raise HTTPException(status_code=422, detail=f"period longer than {settings.max_period_days} days")
    return period


def load_inspections(db: Session, *, station: Optional[str], period: Optional[Period] = None) -> list[Inspection]:
    stmt = select(Inspection).options(selectinload(Inspection.equipment), selectinload(Inspection.observations))
    if station:
        stmt = stmt.where(Inspection.station == station)
    if period is not None:
        stmt = stmt.where(Inspection.inspection_date >= period.start, Inspection.inspection_date <= period.end)
    return list(db.scalars(stmt.order_by(Inspection.inspection_date, Inspection.id)).all())


def _stations(db: Session, station: Optional[str]) -> list[Station]:
    stmt = select(Station).where(Station.is_active.is_(True))
    if station:
        stmt = select(Station).where(Station.code == station)
    return list(db.scalars(stmt.order_by(Station.code)).all())


def _master(db: Session, station: Optional[str]) -> list[EquipmentMaster]:
    stmt = select(EquipmentMaster)
    if station:
        stmt = stmt.where(EquipmentMaster.station == station)
    return list(db.scalars(stmt).all())


def overall(db: Session, *, station: Optional[str], today: Optional[date] = None) -> dict[str, Any]:
    today = today or station_today()
    return overall_stats(
        load_inspections(db, station=station),
        today=today,
        tz=station_tz(),
        top_limit=settings.top_issues_limit,
    )


def _completed_equipment(db: Session, *, station: Optional[str], period: Period) -> list[Any]:
    rows = load_inspections(db, station=station, period=period)
    return equipment_of(completed_in_period(rows, period, station_tz()))


def breakdown(db: Session, *, station: Optional[str], period: Period) -> dict[str, Any]:
    return outcome_breakdown(_completed_equipment(db, station=station, period=period)).as_dict()


def issues(db: Session, *, station: Optional[str], period: Period, limit: int) -> list[dict[str, Any]]:
    return top_issues(_completed_equipment(db, station=station, period=period), limit=limit)


def equipment_ranking(db: Session, *, station: Optional[str], period: Period, limit: int) -> list[dict[str, Any]]:
    rows = load_inspections(db, station=station, period=period)
    completed = completed_in_period(rows, period, station_tz())
    station_of = {i.id: i.station for i in completed}
    return problematic_equipment(equipment_of(completed), limit=limit, station_of=station_of)


def daily(db: Session, *, station: Optional[str], period: Period, today: Optional[date] = None) -> dict[str, Any]:
    today = today or station_today()
    rows = load_inspections(db, station=station, period=period)
    return daily_compliance(rows, period, today=today, tz=station_tz()).as_dict()


def trends(db: Session, *, station: Optional[str], period: Period) -> dict[str, Any]:
    rows = load_inspections(db, station=station, period=period)
    return trend_series(rows, period, tz=station_tz(), max_daily_days=settings.trend_daily_max_days)


def monthly(db: Session, *, station: Optional[str]) -> list[dict[str, Any]]:
    return monthly_trends(load_inspections(db, station=station), tz=station_tz())


def station_ranking(
    db: Session, *, station: Optional[str], period: Period, today: Optional[date] = None
) -> list[dict[str, Any]]:
    today = today or station_today()
    return station_compliance_status(
        load_inspections(db, station=station, period=period),
        _stations(db, station),
        period,
        today=today,
        equipment_master=_master(db, station),
        tz=station_tz(),
        punctuality_window_days=settings.punctuality_window_days,
    )


def station_heatmap(
    db: Session, *, station: Optional[str], period: Period, today: Optional[date] = None
) -> list[dict[str, Any]]:
    today = today or station_today()
    return station_daily_status(
        load_inspections(db, station=station, period=period),
        _stations(db, station),
        period,
        today=today,
        tz=station_tz(),
    )


def en_equipment(
    db: Session, *, station: Optional[str], period: Period, today: Optional[date] = None
) -> dict[str, Any]:
    today = today or station_today()
    grid = en_equipment_heatmap(
        _master(db, station),
        load_inspections(db, station=station, period=period),
        period,
        station=station,
        today=today,
        tz=station_tz(),
    )
    return {"stations": grid, "stats": en_equipment_stats(grid)}
