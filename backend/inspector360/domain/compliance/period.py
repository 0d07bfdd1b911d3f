# backend/inspector360/domain/compliance/period.py
from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Iterable, Iterator, Optional
from zoneinfo import ZoneInfo

from ..lifecycle import InspectionStatus, get_field

DEFAULT_STATION_TZ = "America/Lima"

MONTH_ABBR_ES = ("Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic")


def station_tz(name: Optional[str] = None) -> tzinfo:
    return ZoneInfo(name or DEFAULT_STATION_TZ)


def js_round(x: float) -> int:
    """Half-up rounding, same as the dashboards' Math.round."""
    return int(math.floor(x + 0.5))


def pct(num: int, den: int) -> int:
    return js_round(num / den * 100) if den > 0 else 0


def local_day(value: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Station-local calendar day of a stored value.

    - date                 -> as-is (DATE columns are already station days)
    - naive datetime       -> its date (already local)
    - aware datetime       -> converted to the station timezone first
    - 'YYYY-MM-DD' / ISO   -> parsed the same way
    Anything else -> None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(tz or station_tz()).date()
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            if len(s) == 10:
                return date.fromisoformat(s)
            return local_day(datetime.fromisoformat(s.replace("Z", "+00:00")), tz)
        except ValueError:
            return None

    return None


def today_local(tz: Optional[tzinfo] = None) -> date:
    return datetime.now(tz or station_tz()).date()


@dataclass(frozen=True)
class Period:
    start: date
    end: date

    @property
    def days_in_period(self) -> int:
        if self.end < self.start:
            return 0
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        d = self.start
        while d <= self.end:
            yield d
            if d == self.end:
                return
            d += timedelta(days=1)

    def contains(self, d: Optional[date]) -> bool:
        return d is not None and self.start <= d <= self.end

    def elapsed_days(self, today: date) -> int:
        last = min(self.end, today)
        if last < self.start:
            return 0
        return (last - self.start).days + 1


def month_period(month: str) -> Period:
    """'YYYY-MM' -> first..last day of that month."""
    y_s, m_s = month.strip().split("-", 1)
    y, m = int(y_s), int(m_s)
    last = calendar.monthrange(y, m)[1]
    return Period(date(y, m, 1), date(y, m, last))


def current_month_period(today: date) -> Period:
    last = calendar.monthrange(today.year, today.month)[1]
    return Period(date(today.year, today.month, 1), date(today.year, today.month, last))


def is_completed(inspection: Any) -> bool:
    return str(get_field(inspection, "status") or "") == InspectionStatus.COMPLETED.value


def inspection_day(inspection: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    return local_day(get_field(inspection, "inspection_date"), tz)


def in_period(inspections: Iterable[Any], period: Period, tz: Optional[tzinfo] = None) -> list[Any]:
    return [i for i in inspections or [] if period.contains(inspection_day(i, tz))]


def completed_in_period(inspections: Iterable[Any], period: Period, tz: Optional[tzinfo] = None) -> list[Any]:
    return [i for i in in_period(inspections, period, tz) if is_completed(i)]


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: date) -> str:
    return f"{MONTH_ABBR_ES[d.month - 1]} {d.year}"
