"""
Finance module - hour classification and earnings calculations.

Exports all public functions of the engine.
"""

from .classifier import build_session, classify_hours, detect_day_flags
from .compliance import check_compliance
from .earnings import (
    calculate_base_salary,
    calculate_exempt_supplement,
    calculate_gross_salary,
    calculate_meal_allowances,
    calculate_meal_subsidy,
    calculate_overtime_pay,
    calculate_weekend_bonus,
    daily_exempt_supplement,
    session_overtime_pay,
)
from .exemption import exempt_budget_status, remaining_exempt_budget, sessions_in_year, used_exempt_hours
from .itemization import itemize_sessions
from .period import calculate_period_statement, count_working_days, filter_sessions
from .series import aggregate_by_period, date_range_for, format_period_label, period_windows
from .summary import summarize_hours, summarize_weekend_work
from .taxes import calculate_net_salary, calculate_tax_deductions

__all__ = [
    # classifier
    "build_session",
    "classify_hours",
    "detect_day_flags",
    # compliance
    "check_compliance",
    # earnings
    "calculate_base_salary",
    "calculate_exempt_supplement",
    "calculate_gross_salary",
    "calculate_meal_allowances",
    "calculate_meal_subsidy",
    "calculate_overtime_pay",
    "calculate_weekend_bonus",
    "daily_exempt_supplement",
    "session_overtime_pay",
    # exemption
    "exempt_budget_status",
    "remaining_exempt_budget",
    "sessions_in_year",
    "used_exempt_hours",
    # itemization
    "itemize_sessions",
    # period
    "calculate_period_statement",
    "count_working_days",
    "filter_sessions",
    # series
    "aggregate_by_period",
    "date_range_for",
    "format_period_label",
    "period_windows",
    # summary
    "summarize_hours",
    "summarize_weekend_work",
    # taxes
    "calculate_net_salary",
    "calculate_tax_deductions",
]
