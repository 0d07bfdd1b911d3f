# backend/inspector360/domain/compliance/__init__.py
from .period import Period, js_round, local_day, month_period, current_month_period, today_local
from .top_fail_points import top_issues, problematic_equipment
from .compliance_stats import OutcomeBreakdown, outcome_breakdown, overall_stats
from .daily import DailyCompliance, daily_compliance, trend_series, monthly_trends
from .stations import punctuality_rate, station_compliance_status, station_daily_status
from .en_tracking import en_equipment_heatmap, en_equipment_stats

__all__ = [
    "Period",
    "js_round",
    "local_day",
    "month_period",
    "current_month_period",
    "today_local",
    "top_issues",
    "problematic_equipment",
    "OutcomeBreakdown",
    "outcome_breakdown",
    "overall_stats",
    "DailyCompliance",
    "daily_compliance",
    "trend_series",
    "monthly_trends",
    "punctuality_rate",
    "station_compliance_status",
    "station_daily_status",
    "en_equipment_heatmap",
    "en_equipment_stats",
]
