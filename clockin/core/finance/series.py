"""Chart series: period statements over contiguous sub-windows."""

import calendar
import datetime
import logging
from collections.abc import Sequence

from clockin.core.constants import DAYS_PER_WEEK, DEFAULT_LOCALE, MONTH_ABBREVIATIONS, WEEK_START_WEEKDAY
from clockin.core.models import DateRange, FinanceSettings, Granularity, SeriesPoint, WorkSession
from clockin.core.sentry_config import capture_exception
from clockin.core.time_utils import end_of_day, start_of_day, to_engine_datetime

from .period import calculate_period_statement

logger = logging.getLogger(__name__)


def _parse_granularity(value: Granularity | str) -> Granularity | None:
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError:
        return None


def _week_start(day: datetime.date) -> datetime.date:
    return day - datetime.timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % DAYS_PER_WEEK)


def _month_end(day: datetime.date) -> datetime.date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def _next_month(day: datetime.date) -> datetime.date:
    if day.month == 12:
        return datetime.date(day.year + 1, 1, 1)
    return datetime.date(day.year, day.month + 1, 1)


def _window(first: datetime.date, last: datetime.date) -> DateRange:
    return DateRange(start=start_of_day(first), end=end_of_day(last))


def date_range_for(report_type: Granularity | str, selected_date: datetime.date | datetime.datetime) -> DateRange:
    """
    The report window around a selected date.

    daily -> that day, weekly -> its Monday-Sunday week,
    monthly -> its calendar month, yearly -> its calendar year.

    Raises:
        ValueError: Unknown report type
    """
    granularity = _parse_granularity(report_type)
    day = to_engine_datetime(selected_date).date()

    if granularity == Granularity.DAILY:
        return _window(day, day)
    if granularity == Granularity.WEEKLY:
        monday = _week_start(day)
        return _window(monday, monday + datetime.timedelta(days=DAYS_PER_WEEK - 1))
    if granularity == Granularity.MONTHLY:
        return _window(day.replace(day=1), _month_end(day))
    if granularity == Granularity.YEARLY:
        return _window(datetime.date(day.year, 1, 1), datetime.date(day.year, 12, 31))

    logger.error("Unknown report type. value=%r", report_type)
    raise ValueError(f"Unknown report type: {report_type!r}")


def period_windows(date_range: DateRange, granularity: Granularity | str) -> list[tuple[datetime.date, DateRange]]:
    """
    Splits a range into contiguous calendar windows.

    Each entry is (anchor date, window). The anchor is the first day of the
    window and is what the chart label is formatted from. Weekly, monthly and
    yearly windows cover whole calendar units, so the first and last window
    may reach outside the requested range.

    Returns:
        Windows in chronological order; empty for an unknown granularity
        or an inverted range
    """
    resolved = _parse_granularity(granularity)
    first = date_range.start.date()
    last = date_range.end.date()
    if resolved is None or last < first:
        return []

    windows: list[tuple[datetime.date, DateRange]] = []

    if resolved == Granularity.DAILY:
        current = first
        while current <= last:
            windows.append((current, _window(current, current)))
            current += datetime.timedelta(days=1)

    elif resolved == Granularity.WEEKLY:
        current = _week_start(first)
        while current <= last:
            windows.append((current, _window(current, current + datetime.timedelta(days=DAYS_PER_WEEK - 1))))
            current += datetime.timedelta(days=DAYS_PER_WEEK)

    elif resolved == Granularity.MONTHLY:
        current = first.replace(day=1)
        while current <= last:
            windows.append((current, _window(current, _month_end(current))))
            current = _next_month(current)

    else:
        for year in range(first.year, last.year + 1):
            anchor = datetime.date(year, 1, 1)
            windows.append((anchor, _window(anchor, datetime.date(year, 12, 31))))

    return windows


def format_period_label(day: datetime.date, granularity: Granularity | str, locale: str = DEFAULT_LOCALE) -> str:
    """
    Chart label for a window anchor.

    daily/weekly: "Jan 05, 2025", monthly: "Jan 2025", yearly: "2025".
    Unknown locales fall back to English month names.
    """
    language = (locale or DEFAULT_LOCALE).split("-")[0].lower()
    months = MONTH_ABBREVIATIONS.get(language, MONTH_ABBREVIATIONS[DEFAULT_LOCALE])
    month = months[day.month - 1]
    resolved = _parse_granularity(granularity)

    if resolved == Granularity.YEARLY:
        return f"{day.year:04d}"
    if resolved == Granularity.MONTHLY:
        return f"{month} {day.year:04d}"
    return f"{month} {day.day:02d}, {day.year:04d}"


def aggregate_by_period(
    sessions: Sequence[WorkSession],
    date_range: DateRange,
    granularity: Granularity | str,
    settings: FinanceSettings,
    locale: str = DEFAULT_LOCALE,
) -> list[SeriesPoint]:
    """
    Income series for charts.

    Every window is computed independently with calculate_period_statement.
    Taxes on a point include the meal card deduction. A window that fails is
    logged and reported as a zero point so the rest of the chart survives.

    Args:
        sessions: Finalized sessions
        date_range: Range to cover
        granularity: daily | weekly | monthly | yearly
        settings: FinanceSettings
        locale: Label locale ("en" or "pt")

    Returns:
        One SeriesPoint per window; empty when there are no sessions or the
        granularity is unknown
    """
    if not sessions:
        return []

    resolved = _parse_granularity(granularity)
    if resolved is None:
        logger.warning("Unknown granularity for series. value=%r", granularity)
        return []

    points: list[SeriesPoint] = []
    for anchor, window in period_windows(date_range, resolved):
        label = format_period_label(anchor, resolved, locale)
        try:
            statement = calculate_period_statement(sessions, window, settings)
        except Exception as e:
            logger.exception("Series window failed, using zero point. label=%s", label)
            capture_exception(e, context={"window_start": window.start.isoformat(), "granularity": resolved.value})
            points.append(SeriesPoint(label=label, start=window.start, end=window.end))
            continue

        points.append(
            SeriesPoint(
                label=label,
                start=window.start,
                end=window.end,
                gross_income=statement.earnings.gross_salary,
                net_income=statement.net_salary,
                taxes=statement.deductions.total_with_meal_card,
            )
        )

    logger.debug("Series %s: %d points", resolved.value, len(points))
    return points
