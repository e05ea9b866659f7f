"""Hour and weekend-work statistics."""

from collections.abc import Sequence

from clockin.core.models import HourSummary, WeekendSummary, WorkSession
from clockin.core.time_utils import day_key


def summarize_hours(sessions: Sequence[WorkSession]) -> HourSummary:
    """
    Totals for a set of sessions (typically one report window).

    average_hours_per_day is total hours over distinct calendar days
    worked, 0 when there are none.
    """
    if not sessions:
        return HourSummary()

    total_hours = sum(s.total_hours for s in sessions)
    days_worked = len({day_key(s.clock_in) for s in sessions})

    return HourSummary(
        total_hours=total_hours,
        regular_hours=sum(s.regular_hours for s in sessions),
        exempt_hours=sum(s.exempt_overtime_hours for s in sessions),
        paid_overtime_hours=sum(s.paid_overtime_hours for s in sessions),
        lunch_hours=sum(s.lunch_duration for s in sessions),
        session_count=len(sessions),
        sessions_with_lunch=sum(1 for s in sessions if s.lunch_duration > 0),
        days_worked=days_worked,
        average_hours_per_day=total_hours / days_worked,
    )


def summarize_weekend_work(sessions: Sequence[WorkSession]) -> WeekendSummary:
    """Weekend sessions, days off earned and bonus stored on them."""
    weekend = [s for s in sessions if s.is_weekend]
    return WeekendSummary(
        weekend_sessions=len(weekend),
        days_off_earned=sum(s.weekend_days_off for s in weekend),
        weekend_bonus=sum(s.weekend_bonus for s in weekend),
    )
