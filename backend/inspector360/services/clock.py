# backend/inspector360/services/clock.py
from __future__ import annotations

from datetime import date, tzinfo

from ..config import settings
from ..domain.compliance.period import station_tz as _station_tz, today_local


def station_tz() -> tzinfo:
    return _station_tz(settings.station_timezone)


def station_today() -> date:
    return today_local(station_tz())
