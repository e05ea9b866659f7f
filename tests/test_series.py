# tests/test_series.py
"""
Unit tests for the chart series (statements per sub-window).

Tests verify window generation per granularity, label formatting, that the
daily points of a month add up to the monthly statement, and that a failing
window is replaced by a zero point.
"""

import datetime
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
import clockin.core.finance.series as series_module
from clockin.core.finance import (
    aggregate_by_period,
    calculate_period_statement,
    date_range_for,
    format_period_label,
    period_windows,
)
from clockin.core.models import DateRange, FinanceSettings, Granularity
from clockin.core.time_utils import end_of_day, start_of_day


def window(first: datetime.date, last: datetime.date) -> DateRange:
    return DateRange(start=start_of_day(first), end=end_of_day(last))


MARCH = window(datetime.date(2025, 3, 1), datetime.date(2025, 3, 31))
YEAR_2025 = window(datetime.date(2025, 1, 1), datetime.date(2025, 12, 31))


@pytest.fixture
def month_sessions(make_session):
    """Sessions spread over March 2025, two of them on the same day."""
    return [
        make_session(datetime.date(2025, 3, 3), regular=8, exempt=1.5),
        make_session(datetime.date(2025, 3, 3), paid=1.0, hour=20),
        make_session(datetime.date(2025, 3, 12), regular=8, paid=3.0),
        make_session(datetime.date(2025, 3, 15), regular=6, is_weekend=True, weekend_bonus=100.0),
        make_session(datetime.date(2025, 3, 31), regular=8, exempt=2.0, hour=8),
    ]


class TestPeriodWindows:
    def test_daily_windows_cover_every_day(self):
        windows = period_windows(MARCH, Granularity.DAILY)

        assert len(windows) == 31
        assert windows[0][0] == datetime.date(2025, 3, 1)
        assert windows[-1][1].end == end_of_day(datetime.date(2025, 3, 31))

    def test_weekly_windows_start_on_monday(self):
        """1-31 March 2025 touches six Monday-Sunday weeks."""
        windows = period_windows(MARCH, "weekly")

        anchors = [anchor for anchor, _ in windows]
        assert anchors[0] == datetime.date(2025, 2, 24)
        assert anchors[-1] == datetime.date(2025, 3, 31)
        assert len(windows) == 6
        assert all(anchor.weekday() == 0 for anchor in anchors)

    def test_monthly_windows(self):
        windows = period_windows(YEAR_2025, Granularity.MONTHLY)

        assert len(windows) == 12
        feb = windows[1][1]
        assert feb.start == start_of_day(datetime.date(2025, 2, 1))
        assert feb.end == end_of_day(datetime.date(2025, 2, 28))

    def test_yearly_windows(self):
        span = window(datetime.date(2024, 6, 1), datetime.date(2026, 2, 1))
        assert [anchor.year for anchor, _ in period_windows(span, Granularity.YEARLY)] == [2024, 2025, 2026]

    def test_unknown_granularity(self):
        assert period_windows(MARCH, "hourly") == []


class TestLabels:
    @pytest.mark.parametrize(
        "granularity, locale, expected",
        [
            (Granularity.DAILY, "en", "Mar 05, 2025"),
            (Granularity.WEEKLY, "en", "Mar 05, 2025"),
            (Granularity.MONTHLY, "en", "Mar 2025"),
            (Granularity.YEARLY, "en", "2025"),
            (Granularity.MONTHLY, "pt", "mar 2025"),
            (Granularity.DAILY, "pt-PT", "mar 05, 2025"),
            (Granularity.MONTHLY, "xx", "Mar 2025"),
        ],
    )
    def test_label_format(self, granularity, locale, expected):
        assert format_period_label(datetime.date(2025, 3, 5), granularity, locale) == expected

    def test_portuguese_month_names(self):
        assert format_period_label(datetime.date(2025, 5, 1), Granularity.MONTHLY, "pt") == "mai 2025"


class TestDateRangeFor:
    def test_weekly_window_around_date(self):
        """Thursday 13 March 2025 belongs to the week of Monday 10 March."""
        date_range = date_range_for("weekly", datetime.date(2025, 3, 13))

        assert date_range.start == start_of_day(datetime.date(2025, 3, 10))
        assert date_range.end == end_of_day(datetime.date(2025, 3, 16))

    def test_monthly_window_leap_year(self):
        date_range = date_range_for(Granularity.MONTHLY, datetime.date(2024, 2, 10))
        assert date_range.end == end_of_day(datetime.date(2024, 2, 29))

    def test_daily_and_yearly(self):
        day = datetime.date(2025, 7, 4)
        assert date_range_for("daily", day).start == start_of_day(day)
        assert date_range_for("yearly", day).end == end_of_day(datetime.date(2025, 12, 31))

    def test_unknown_report_type(self):
        with pytest.raises(ValueError):
            date_range_for("fortnightly", datetime.date(2025, 7, 4))


class TestAggregateByPeriod:
    def test_empty_sessions_give_empty_series(self, finance_settings):
        assert aggregate_by_period([], MARCH, Granularity.DAILY, finance_settings) == []

    def test_unknown_granularity_gives_empty_series(self, finance_settings, month_sessions):
        assert aggregate_by_period(month_sessions, MARCH, "hourly", finance_settings) == []

    def test_daily_points_sum_to_month(self, finance_settings, month_sessions):
        """Daily gross / net / taxes over March add up to the March statement."""
        points = aggregate_by_period(month_sessions, MARCH, Granularity.DAILY, finance_settings)
        month = calculate_period_statement(month_sessions, MARCH, finance_settings)

        assert len(points) == 31
        assert sum(p.gross_income for p in points) == pytest.approx(month.earnings.gross_salary)
        assert sum(p.net_income for p in points) == pytest.approx(month.net_salary)
        assert sum(p.taxes for p in points) == pytest.approx(month.deductions.total)

    def test_days_without_sessions_are_zero(self, finance_settings, month_sessions):
        points = aggregate_by_period(month_sessions, MARCH, Granularity.DAILY, finance_settings)

        assert points[1].label == "Mar 02, 2025"
        assert points[1].gross_income == 0.0
        assert points[2].gross_income > 0.0

    def test_monthly_series_over_year(self, finance_settings, month_sessions):
        points = aggregate_by_period(month_sessions, YEAR_2025, Granularity.MONTHLY, finance_settings, locale="pt")

        assert [p.label for p in points][:3] == ["jan 2025", "fev 2025", "mar 2025"]
        assert points[2].gross_income == pytest.approx(
            calculate_period_statement(month_sessions, MARCH, finance_settings).earnings.gross_salary
        )

    def test_taxes_include_meal_card(self, month_sessions):
        settings = FinanceSettings(hourly_rate=10.0, social_security_rate=11.0, meal_card_deduction=15.0)

        points = aggregate_by_period(month_sessions, MARCH, Granularity.MONTHLY, settings)
        month = calculate_period_statement(month_sessions, MARCH, settings)

        assert len(points) == 1
        assert points[0].taxes == pytest.approx(month.deductions.total + 15.0)

    def test_failing_window_becomes_zero_point(self, finance_settings, month_sessions, monkeypatch):
        """One broken window must not break the whole chart."""
        captured = []
        real_statement = series_module.calculate_period_statement

        def flaky_statement(sessions, date_range, settings):
            if date_range.start.date() == datetime.date(2025, 3, 12):
                raise RuntimeError("boom")
            return real_statement(sessions, date_range, settings)

        monkeypatch.setattr(series_module, "calculate_period_statement", flaky_statement)
        monkeypatch.setattr(series_module, "capture_exception", lambda error, context=None: captured.append(error))

        points = aggregate_by_period(month_sessions, MARCH, Granularity.DAILY, finance_settings)

        assert len(points) == 31
        broken = points[11]
        assert broken.label == "Mar 12, 2025"
        assert (broken.gross_income, broken.net_income, broken.taxes) == (0.0, 0.0, 0.0)
        assert points[2].gross_income > 0.0
        assert len(captured) == 1
