"""
Portuguese labor-law checks (Código do Trabalho) for one calendar year.

Checks:
    - daily hours above the normal 8h (warning) and the 10h maximum (violation)
    - weekly hours above 40h (warning, the law limits the average)
    - annual paid overtime near (warning) or above (violation) 150h
    - less than 11h rest between two working days (violation)
    - annual Isenção usage at 80% and 100% of the worker's limit (warning)
"""

import datetime
import logging
from collections import defaultdict
from collections.abc import Iterable

from clockin.core.constants import (
    DAYS_PER_WEEK,
    LIMIT_WARNING_RATIO,
    MAX_DAILY_HOURS,
    MAX_DAILY_HOURS_WITH_OVERTIME,
    MAX_OVERTIME_YEARLY,
    MAX_WEEKLY_HOURS,
    MIN_REST_BETWEEN_DAYS,
    WEEK_START_WEEKDAY,
)
from clockin.core.models import (
    ComplianceFinding,
    ComplianceReport,
    ComplianceSeverity,
    ExemptBudgetStatus,
    ThresholdSettings,
    WorkSession,
)
from clockin.core.time_utils import day_key, hours_between, start_of_day

from .exemption import exempt_budget_status, sessions_in_year

logger = logging.getLogger(__name__)

RULE_DAILY_NORMAL = "daily_normal_hours"
RULE_DAILY_MAX = "daily_max_hours"
RULE_WEEKLY = "weekly_hours"
RULE_OVERTIME_YEARLY = "annual_overtime"
RULE_REST = "rest_between_days"
RULE_EXEMPT_APPROACHING = "exempt_limit_approaching"
RULE_EXEMPT_REACHED = "exempt_limit_reached"


def _daily_findings(year_sessions: list[WorkSession]) -> list[ComplianceFinding]:
    hours_per_day: dict[str, float] = defaultdict(float)
    for s in year_sessions:
        hours_per_day[day_key(s.clock_in)] += s.working_hours

    findings = []
    for day, hours in sorted(hours_per_day.items()):
        if hours > MAX_DAILY_HOURS_WITH_OVERTIME:
            findings.append(
                ComplianceFinding(
                    rule=RULE_DAILY_MAX,
                    severity=ComplianceSeverity.VIOLATION,
                    period=day,
                    value=hours,
                    limit=MAX_DAILY_HOURS_WITH_OVERTIME,
                    message=f"{hours:.2f}h worked on {day}, maximum is {MAX_DAILY_HOURS_WITH_OVERTIME:g}h",
                )
            )
        elif hours > MAX_DAILY_HOURS:
            findings.append(
                ComplianceFinding(
                    rule=RULE_DAILY_NORMAL,
                    severity=ComplianceSeverity.WARNING,
                    period=day,
                    value=hours,
                    limit=MAX_DAILY_HOURS,
                    message=f"{hours:.2f}h worked on {day}, normal day is {MAX_DAILY_HOURS:g}h",
                )
            )
    return findings


def _weekly_findings(year_sessions: list[WorkSession]) -> list[ComplianceFinding]:
    hours_per_week: dict[datetime.date, float] = defaultdict(float)
    for s in year_sessions:
        day = s.clock_in.date()
        monday = day - datetime.timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % DAYS_PER_WEEK)
        hours_per_week[monday] += s.working_hours

    findings = []
    for monday, hours in sorted(hours_per_week.items()):
        if hours > MAX_WEEKLY_HOURS:
            period = f"week of {monday.isoformat()}"
            findings.append(
                ComplianceFinding(
                    rule=RULE_WEEKLY,
                    severity=ComplianceSeverity.WARNING,
                    period=period,
                    value=hours,
                    limit=MAX_WEEKLY_HOURS,
                    message=f"{hours:.2f}h worked in the {period}, normal week is {MAX_WEEKLY_HOURS:g}h",
                )
            )
    return findings


def _overtime_findings(year: int, paid_overtime: float) -> list[ComplianceFinding]:
    if paid_overtime > MAX_OVERTIME_YEARLY:
        severity = ComplianceSeverity.VIOLATION
        message = f"{paid_overtime:.2f}h paid overtime in {year}, annual maximum is {MAX_OVERTIME_YEARLY:g}h"
    elif paid_overtime >= MAX_OVERTIME_YEARLY * LIMIT_WARNING_RATIO:
        severity = ComplianceSeverity.WARNING
        message = f"{paid_overtime:.2f}h paid overtime in {year}, approaching {MAX_OVERTIME_YEARLY:g}h"
    else:
        return []

    return [
        ComplianceFinding(
            rule=RULE_OVERTIME_YEARLY,
            severity=severity,
            period=str(year),
            value=paid_overtime,
            limit=MAX_OVERTIME_YEARLY,
            message=message,
        )
    ]


def _rest_findings(year_sessions: list[WorkSession]) -> list[ComplianceFinding]:
    """Gaps shorter than the minimum rest between sessions on different days."""
    finished = sorted((s for s in year_sessions if s.clock_out is not None), key=lambda s: s.clock_in)

    findings = []
    for previous, current in zip(finished, finished[1:]):
        if day_key(previous.clock_in) == day_key(current.clock_in):
            continue
        rest = hours_between(previous.clock_out, current.clock_in)
        if rest < MIN_REST_BETWEEN_DAYS:
            period = f"{day_key(previous.clock_in)} / {day_key(current.clock_in)}"
            findings.append(
                ComplianceFinding(
                    rule=RULE_REST,
                    severity=ComplianceSeverity.VIOLATION,
                    period=period,
                    value=rest,
                    limit=MIN_REST_BETWEEN_DAYS,
                    message=f"Only {rest:.2f}h rest between {period}, minimum is {MIN_REST_BETWEEN_DAYS:g}h",
                )
            )
    return findings


def _exempt_findings(status: ExemptBudgetStatus) -> list[ComplianceFinding]:
    if status.limit <= 0:
        return []

    if status.exhausted:
        rule = RULE_EXEMPT_REACHED
        message = f"Isenção limit of {status.limit:g}h reached in {status.year}"
    elif status.used >= status.limit * LIMIT_WARNING_RATIO:
        rule = RULE_EXEMPT_APPROACHING
        message = f"{status.percent_used:.0f}% of the {status.limit:g}h Isenção limit used in {status.year}"
    else:
        return []

    return [
        ComplianceFinding(
            rule=rule,
            severity=ComplianceSeverity.WARNING,
            period=str(status.year),
            value=status.used,
            limit=status.limit,
            message=message,
        )
    ]


def check_compliance(
    sessions: Iterable[WorkSession],
    year: int,
    thresholds: ThresholdSettings,
) -> ComplianceReport:
    """
    Runs every labor-law check on the sessions of `year`.

    Args:
        sessions: Finalized sessions (other years are ignored)
        year: Calendar year in the engine timezone
        thresholds: Worker's thresholds (annual Isenção limit)

    Returns:
        ComplianceReport with findings in check order
    """
    reference = start_of_day(datetime.date(year, 1, 1))
    year_sessions = sessions_in_year(list(sessions), reference)
    paid_overtime = sum(s.paid_overtime_hours for s in year_sessions)
    status = exempt_budget_status(year_sessions, reference, thresholds)

    findings = [
        *_daily_findings(year_sessions),
        *_weekly_findings(year_sessions),
        *_overtime_findings(year, paid_overtime),
        *_rest_findings(year_sessions),
        *_exempt_findings(status),
    ]

    logger.debug("Compliance %d: sessions=%d findings=%d", year, len(year_sessions), len(findings))

    return ComplianceReport(
        year=year,
        findings=tuple(findings),
        paid_overtime_hours=paid_overtime,
        exempt_status=status,
        compliant=not any(f.severity == ComplianceSeverity.VIOLATION for f in findings),
    )
