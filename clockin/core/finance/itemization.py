"""Per-session line items for itemized statement views."""

from collections.abc import Iterable

from clockin.core.models import ExemptCalculationMethod, FinanceSettings, SessionLineItem, WorkSession
from clockin.core.time_utils import day_key

from .earnings import calculate_base_salary, daily_exempt_supplement, session_overtime_pay


def _daily_supplement_for_display(settings: FinanceSettings, working_days: int) -> float:
    if settings.exempt_calculation_method == ExemptCalculationMethod.FIXED:
        # Lump sum spread over the working days, display only
        return settings.exempt_fixed_amount / working_days if working_days > 0 else 0.0
    return daily_exempt_supplement(settings.hourly_rate, settings.exempt_supplement_rate)


def itemize_sessions(
    sessions: Iterable[WorkSession],
    settings: FinanceSettings,
    working_days: int,
) -> tuple[SessionLineItem, ...]:
    """
    Builds one line item per session.

    The once-per-day Isenção supplement is attributed to the first session
    seen on each calendar day so it is not counted twice. The authoritative
    totals live in the statement and never read these values.
    """
    daily_supplement = _daily_supplement_for_display(settings, working_days)
    seen_days: set[str] = set()
    items = []

    for s in sessions:
        key = day_key(s.clock_in)
        exempt_earnings = 0.0
        if daily_supplement > 0 and key not in seen_days:
            exempt_earnings = daily_supplement
            seen_days.add(key)

        base_earnings = calculate_base_salary(s.regular_hours, settings.hourly_rate)
        overtime_earnings = session_overtime_pay(s, settings)
        meal_earnings = s.meal_amount if settings.meal_allowance_included else 0.0

        items.append(
            SessionLineItem(
                id=s.id,
                date=s.clock_in,
                regular_hours=s.regular_hours,
                exempt_hours=s.exempt_overtime_hours,
                paid_overtime_hours=s.paid_overtime_hours,
                is_weekend=s.is_weekend,
                is_holiday=s.is_bank_holiday,
                weekend_bonus=s.weekend_bonus,
                lunch_amount=s.lunch_amount,
                dinner_amount=s.dinner_amount if s.had_dinner else 0.0,
                base_earnings=base_earnings,
                exempt_earnings=exempt_earnings,
                overtime_earnings=overtime_earnings,
                meal_earnings=meal_earnings,
                total_earnings=base_earnings + exempt_earnings + overtime_earnings + s.weekend_bonus + meal_earnings,
            )
        )

    return tuple(items)
