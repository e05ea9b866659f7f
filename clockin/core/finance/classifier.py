"""Hour categorization: regular / Isenção / paid overtime."""

import datetime
import logging
from collections.abc import Iterable
from typing import Any

from clockin.core.constants import WEEKEND_WEEKDAYS
from clockin.core.holidays import is_bank_holiday as is_national_holiday
from clockin.core.models import HourBreakdown, ThresholdSettings, WorkSession
from clockin.core.time_utils import hours_between, to_engine_datetime

from .exemption import remaining_exempt_budget

logger = logging.getLogger(__name__)


def classify_hours(
    working_hours: float,
    is_special_day: bool,
    thresholds: ThresholdSettings,
    remaining_exempt_budget: float,
) -> HourBreakdown:
    """
    Splits a session's working hours into the three buckets.

    Rules:
        - regular = min(working, regular threshold)
        - weekend / bank holiday: no Isenção, everything above the regular
          threshold is paid overtime
        - Isenção disabled: same as a special day
        - otherwise hours between the two thresholds are Isenção while the
          annual budget lasts; once the budget runs out mid-session the rest
          above the regular threshold is paid overtime, even below the
          Isenção threshold

    Args:
        working_hours: Session duration minus lunch
        is_special_day: Weekend or bank holiday
        thresholds: Worker's threshold settings
        remaining_exempt_budget: Isenção hours still available this year

    Returns:
        HourBreakdown (never negative)
    """
    working = max(0.0, working_hours)
    budget = max(0.0, remaining_exempt_budget)
    regular_threshold = thresholds.regular_hours_threshold

    regular = min(working, regular_threshold)
    above_regular = max(0.0, working - regular_threshold)

    if is_special_day or not thresholds.enable_exempt_overtime:
        return HourBreakdown(regular=regular, exempt_overtime=0.0, paid_overtime=above_regular)

    potential_exempt = min(above_regular, thresholds.exempt_band)

    if potential_exempt <= budget:
        exempt = potential_exempt
    else:
        exempt = budget
        logger.debug(
            "Isenção budget exhausted mid-session: potential=%.2f budget=%.2f",
            potential_exempt,
            budget,
        )

    paid = max(0.0, working - regular_threshold - exempt)

    return HourBreakdown(regular=regular, exempt_overtime=exempt, paid_overtime=paid)


def detect_day_flags(clock_in: datetime.datetime) -> tuple[bool, bool]:
    """(is_weekend, is_bank_holiday) for the local calendar day of clock_in."""
    day = to_engine_datetime(clock_in).date()
    return day.weekday() in WEEKEND_WEEKDAYS, is_national_holiday(day)


def build_session(
    clock_in: Any,
    clock_out: Any,
    thresholds: ThresholdSettings,
    history: Iterable[WorkSession] = (),
    lunch_duration: float | None = None,
    is_weekend: bool | None = None,
    is_bank_holiday: bool | None = None,
    **details: Any,
) -> WorkSession:
    """
    Finalizes a session at clock-out with its hour split frozen.

    Reads the Isenção budget from `history` (a snapshot of the worker's
    earlier sessions), classifies the working hours and attaches the weekend
    bonus / days off from the threshold settings to weekend sessions.

    Args:
        clock_in: Start instant (datetime or epoch ms)
        clock_out: End instant (datetime or epoch ms)
        thresholds: Worker's threshold settings
        history: Previously finalized sessions
        lunch_duration: Hours of lunch; None = settings default
        is_weekend: Override; None = detect from the date
        is_bank_holiday: Override; None = detect Portuguese national holidays
        **details: Extra session fields (id, lunch_amount, had_dinner, ...)

    Returns:
        Immutable WorkSession
    """
    start = to_engine_datetime(clock_in)
    end = to_engine_datetime(clock_out)
    total_hours = hours_between(start, end)

    if lunch_duration is None:
        lunch_duration = thresholds.default_lunch_duration
    lunch_duration = max(0.0, lunch_duration)
    working_hours = max(0.0, total_hours - lunch_duration)

    detected_weekend, detected_holiday = detect_day_flags(start)
    weekend = detected_weekend if is_weekend is None else is_weekend
    holiday = detected_holiday if is_bank_holiday is None else is_bank_holiday

    remaining = remaining_exempt_budget(history, start, thresholds)
    split = classify_hours(working_hours, weekend or holiday, thresholds, remaining)

    fields = {
        "weekend_bonus": thresholds.weekend_bonus if weekend else 0.0,
        "weekend_days_off": thresholds.weekend_days_off if weekend else 0.0,
        **details,
    }

    logger.debug(
        "Session finalized: start=%s hours=%.2f regular=%.2f exempt=%.2f paid=%.2f",
        start.isoformat(),
        working_hours,
        split.regular,
        split.exempt_overtime,
        split.paid_overtime,
    )

    return WorkSession(
        clock_in=start,
        clock_out=end,
        total_hours=total_hours,
        lunch_duration=lunch_duration,
        regular_hours=split.regular,
        exempt_overtime_hours=split.exempt_overtime,
        paid_overtime_hours=split.paid_overtime,
        is_weekend=weekend,
        is_bank_holiday=holiday,
        **fields,
    )
