"""Period earnings statement (sessions in a date window)."""

import logging
from collections.abc import Iterable

from clockin.core.models import (
    DateRange,
    EarningsBreakdown,
    ExemptCalculationMethod,
    FinanceSettings,
    HourTotals,
    PeriodEarningsStatement,
    WorkSession,
)
from clockin.core.time_utils import day_key

from .earnings import (
    calculate_base_salary,
    calculate_exempt_supplement,
    calculate_gross_salary,
    calculate_meal_allowances,
    calculate_meal_subsidy,
    calculate_weekend_bonus,
    session_overtime_pay,
)
from .itemization import itemize_sessions
from .taxes import calculate_net_salary, calculate_tax_deductions

logger = logging.getLogger(__name__)

#: Windows shorter than this are flagged when a fixed Isenção amount is applied.
_FIXED_SUPPLEMENT_MIN_DAYS = 28


def filter_sessions(sessions: Iterable[WorkSession], date_range: DateRange) -> list[WorkSession]:
    """Sessions whose clock_in lies in [start, end]."""
    return [s for s in sessions if date_range.contains(s.clock_in)]


def count_working_days(sessions: Iterable[WorkSession]) -> int:
    """Distinct calendar days with at least one session."""
    return len({day_key(s.clock_in) for s in sessions})


def _exempt_supplement(settings: FinanceSettings, working_days: int, date_range: DateRange) -> float:
    if settings.exempt_calculation_method == ExemptCalculationMethod.FIXED:
        window_days = (date_range.end - date_range.start).days + 1
        if settings.exempt_fixed_amount > 0 and window_days < _FIXED_SUPPLEMENT_MIN_DAYS:
            logger.warning(
                "Fixed Isenção amount applied in full to a %d-day window (%s - %s)",
                window_days,
                date_range.start.date(),
                date_range.end.date(),
            )
        return calculate_exempt_supplement(
            settings.hourly_rate, settings.exempt_fixed_amount, working_days, ExemptCalculationMethod.FIXED
        )

    return calculate_exempt_supplement(
        settings.hourly_rate, settings.exempt_supplement_rate, working_days, ExemptCalculationMethod.PERCENTAGE
    )


def calculate_period_statement(
    sessions: Iterable[WorkSession],
    date_range: DateRange,
    settings: FinanceSettings,
) -> PeriodEarningsStatement:
    """
    Full earnings statement for a date window.

    Steps:
        1. Filter sessions on clock_in within the window
        2. Sum hour buckets, overtime pay per session (weekend/holiday flags)
        3. Count working days
        4. Earnings -> deductions -> net, then itemize per session

    Args:
        sessions: Finalized sessions (any order)
        date_range: Inclusive window
        settings: FinanceSettings

    Returns:
        PeriodEarningsStatement (fully zeroed when no session is in range)
    """
    filtered = filter_sessions(sessions, date_range)
    if not filtered:
        return PeriodEarningsStatement.empty(date_range)

    regular_hours = sum(s.regular_hours for s in filtered)
    exempt_hours = sum(s.exempt_overtime_hours for s in filtered)
    paid_overtime_hours = sum(s.paid_overtime_hours for s in filtered)
    overtime = sum(session_overtime_pay(s, settings) for s in filtered)

    working_days = count_working_days(filtered)

    base_salary = calculate_base_salary(regular_hours, settings.hourly_rate)
    exempt_supplement = _exempt_supplement(settings, working_days, date_range)
    weekend_bonus = calculate_weekend_bonus(filtered)
    meal_allowances = calculate_meal_allowances(filtered, settings.meal_allowance_included)
    meal_subsidy = calculate_meal_subsidy(settings.daily_meal_subsidy, working_days)

    gross_salary = calculate_gross_salary(
        base_salary,
        exempt_supplement,
        overtime,
        weekend_bonus,
        meal_allowances,
        fixed_bonus=settings.fixed_bonus,
        meal_subsidy=meal_subsidy,
    )

    deductions = calculate_tax_deductions(base_salary, exempt_supplement, overtime, settings)
    net_salary = calculate_net_salary(gross_salary, deductions.total, deductions.meal_card_deduction)

    logger.debug(
        "Statement %s - %s: sessions=%d days=%d gross=%.2f net=%.2f",
        date_range.start.date(),
        date_range.end.date(),
        len(filtered),
        working_days,
        gross_salary,
        net_salary,
    )

    return PeriodEarningsStatement(
        start=date_range.start,
        end=date_range.end,
        session_count=len(filtered),
        hours=HourTotals(
            regular=regular_hours,
            exempt=exempt_hours,
            paid_overtime=paid_overtime_hours,
            total=regular_hours + exempt_hours + paid_overtime_hours,
        ),
        earnings=EarningsBreakdown(
            base_salary=base_salary,
            exempt_supplement=exempt_supplement,
            overtime=overtime,
            weekend_bonus=weekend_bonus,
            meal_allowances=meal_allowances,
            fixed_bonus=settings.fixed_bonus,
            meal_subsidy=meal_subsidy,
            gross_salary=gross_salary,
        ),
        working_days=working_days,
        deductions=deductions,
        net_salary=net_salary,
        sessions=itemize_sessions(filtered, settings, working_days),
    )
