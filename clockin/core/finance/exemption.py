"""Annual Isenção (IHT) budget tracking."""

import datetime
from collections.abc import Iterable

from clockin.core.models import ExemptBudgetStatus, ThresholdSettings, WorkSession
from clockin.core.time_utils import to_engine_datetime, year_bounds


def sessions_in_year(sessions: Iterable[WorkSession], reference: datetime.datetime) -> list[WorkSession]:
    """Sessions whose clock_in falls in the calendar year containing reference."""
    year_start, year_end = year_bounds(reference)
    return [s for s in sessions if year_start <= s.clock_in <= year_end]


def used_exempt_hours(sessions: Iterable[WorkSession], reference: datetime.datetime) -> float:
    """
    Isenção hours already consumed in the calendar year of `reference`.

    Pure: only reads the given snapshot of sessions.
    """
    return sum(s.exempt_overtime_hours for s in sessions_in_year(sessions, reference))


def remaining_exempt_budget(
    sessions: Iterable[WorkSession],
    reference: datetime.datetime,
    thresholds: ThresholdSettings,
) -> float:
    """max(0, annual limit - used) for the year of `reference`."""
    return max(0.0, thresholds.annual_exempt_limit - used_exempt_hours(sessions, reference))


def exempt_budget_status(
    sessions: Iterable[WorkSession],
    reference: datetime.datetime,
    thresholds: ThresholdSettings,
) -> ExemptBudgetStatus:
    """
    Isenção usage for the year of `reference`.

    Returns:
        ExemptBudgetStatus with year, limit, used, remaining, percent_used, exhausted
    """
    limit = thresholds.annual_exempt_limit
    used = used_exempt_hours(sessions, reference)
    remaining = max(0.0, limit - used)
    percent_used = (used / limit * 100.0) if limit > 0 else 0.0

    return ExemptBudgetStatus(
        year=to_engine_datetime(reference).year,
        limit=limit,
        used=used,
        remaining=remaining,
        percent_used=percent_used,
        exhausted=remaining <= 0.0,
    )
