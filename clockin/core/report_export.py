"""CSV time report for a report window."""

import csv
import datetime
import io
from collections.abc import Sequence

from clockin.core.config import DATE_FORMAT_ISO, DATETIME_FORMAT_REPORT, TIME_FORMAT_HMS
from clockin.core.finance import filter_sessions, format_period_label, summarize_hours
from clockin.core.models import DateRange, Granularity, WorkSession
from clockin.core.time_utils import to_engine_datetime

REPORT_TITLE = "Clock In App - Time Report"

SESSION_COLUMNS = (
    "Date",
    "Clock In",
    "Clock Out",
    "Total Hours",
    "Lunch Time",
    "Regular Hours",
    "Isenção (Unpaid)",
    "Overwork (Paid)",
)


def _hours(value: float) -> str:
    return f"{value:.2f}"


def _session_row(session: WorkSession) -> list[str]:
    clock_out = session.clock_out.strftime(TIME_FORMAT_HMS) if session.clock_out is not None else ""
    return [
        session.clock_in.strftime(DATE_FORMAT_ISO),
        session.clock_in.strftime(TIME_FORMAT_HMS),
        clock_out,
        _hours(session.total_hours),
        _hours(session.lunch_duration),
        _hours(session.regular_hours),
        _hours(session.exempt_overtime_hours),
        _hours(session.paid_overtime_hours),
    ]


def report_filename(report_type: Granularity | str, generated_at: datetime.datetime) -> str:
    """Download name, e.g. "clock-report-monthly-2026-03-31.csv"."""
    value = report_type.value if isinstance(report_type, Granularity) else str(report_type)
    return f"clock-report-{value}-{generated_at.strftime(DATE_FORMAT_ISO)}.csv"


def build_time_report_csv(
    sessions: Sequence[WorkSession],
    date_range: DateRange,
    report_type: Granularity | str,
    generated_at: datetime.datetime | None = None,
) -> str:
    """
    Renders the time report of a window as CSV text.

    Layout: four header lines (title, period, report type, generated at),
    a blank line, one row per session in clock-in order, a blank line and a
    summary block. Hours are written with two decimals.

    Args:
        sessions: Sessions (filtered to the window here)
        date_range: Report window
        report_type: daily | weekly | monthly | yearly (title only)
        generated_at: Timestamp for the "Generated" line, defaults to now

    Returns:
        CSV document as a string
    """
    generated = to_engine_datetime(generated_at or datetime.datetime.now(datetime.timezone.utc))
    in_range = sorted(filter_sessions(sessions, date_range), key=lambda s: s.clock_in)
    summary = summarize_hours(in_range)
    type_label = (report_type.value if isinstance(report_type, Granularity) else str(report_type)).capitalize()

    period = (
        f"{format_period_label(date_range.start.date(), Granularity.DAILY)} - "
        f"{format_period_label(date_range.end.date(), Granularity.DAILY)}"
    )

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow([REPORT_TITLE])
    writer.writerow([f"Period: {period}"])
    writer.writerow([f"Report Type: {type_label}"])
    writer.writerow([f"Generated: {generated.strftime(DATETIME_FORMAT_REPORT)}"])
    writer.writerow([])

    writer.writerow(SESSION_COLUMNS)
    for session in in_range:
        writer.writerow(_session_row(session))
    writer.writerow([])

    writer.writerow(["Summary"])
    writer.writerow(["Total Sessions", summary.session_count])
    writer.writerow(["Total Days Worked", summary.days_worked])
    writer.writerow(["Total Hours", _hours(summary.total_hours)])
    writer.writerow(["Lunch Hours", _hours(summary.lunch_hours)])
    writer.writerow(["Regular Hours", _hours(summary.regular_hours)])
    writer.writerow(["Isenção Hours (Unpaid)", _hours(summary.exempt_hours)])
    writer.writerow(["Overwork Hours (Paid)", _hours(summary.paid_overtime_hours)])

    return buffer.getvalue()
