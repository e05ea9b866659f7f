# tests/test_period.py
"""
Unit tests for period earnings statements and per-session itemization.

Reference month: March 2025 with an hourly rate of 10 EUR, Isenção at 25%
of the hourly rate per working day and Segurança Social at 11%.
"""

import datetime
import logging
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from clockin.core.finance import calculate_period_statement, count_working_days, itemize_sessions
from clockin.core.models import DateRange, FinanceSettings
from clockin.core.time_utils import end_of_day, start_of_day

MARCH = DateRange(start=start_of_day(datetime.date(2025, 3, 1)), end=end_of_day(datetime.date(2025, 3, 31)))


@pytest.fixture
def march_sessions(make_session):
    """
    Two sessions on Monday 10 March and one on Saturday 15 March.

    - 10 Mar 09:00: 8 regular + 1 Isenção
    - 10 Mar 20:00: 1 paid overtime (weekday, 12.50 EUR)
    - 15 Mar 09:00: 8 regular + 2 paid on a weekend (30 EUR) + 100 EUR bonus
    """
    return [
        make_session(datetime.date(2025, 3, 10), regular=8, exempt=1, id="a"),
        make_session(datetime.date(2025, 3, 10), paid=1, hour=20, id="b"),
        make_session(datetime.date(2025, 3, 15), regular=8, paid=2, is_weekend=True, weekend_bonus=100.0, id="c"),
    ]


class TestEmptyPeriod:
    def test_no_sessions_gives_zero_statement(self, finance_settings):
        statement = calculate_period_statement([], MARCH, finance_settings)

        assert statement.session_count == 0
        assert statement.working_days == 0
        assert statement.earnings.gross_salary == 0.0
        assert statement.deductions.total == 0.0
        assert statement.net_salary == 0.0
        assert statement.sessions == ()
        assert statement.start == MARCH.start

    def test_sessions_outside_window_ignored(self, finance_settings, make_session):
        sessions = [make_session(datetime.date(2025, 4, 1), regular=8)]

        statement = calculate_period_statement(sessions, MARCH, finance_settings)

        assert statement.session_count == 0
        assert statement.earnings.gross_salary == 0.0

    def test_fixed_bonus_not_paid_for_empty_window(self):
        settings = FinanceSettings(hourly_rate=10.0, fixed_bonus=200.0)
        statement = calculate_period_statement([], MARCH, settings)

        assert statement.earnings.gross_salary == 0.0


class TestStatement:
    def test_full_statement(self, finance_settings, march_sessions):
        statement = calculate_period_statement(march_sessions, MARCH, finance_settings)

        assert statement.session_count == 3
        assert statement.working_days == 2
        assert statement.hours.regular == pytest.approx(16.0)
        assert statement.hours.exempt == pytest.approx(1.0)
        assert statement.hours.paid_overtime == pytest.approx(3.0)
        assert statement.hours.total == pytest.approx(20.0)

        earnings = statement.earnings
        assert earnings.base_salary == pytest.approx(160.0)
        assert earnings.exempt_supplement == pytest.approx(5.0), "2 working days * 10 * 25%"
        assert earnings.overtime == pytest.approx(42.5)
        assert earnings.weekend_bonus == pytest.approx(100.0)
        assert earnings.meal_allowances == 0.0
        assert earnings.gross_salary == pytest.approx(307.5)

        assert statement.deductions.social_security == pytest.approx(18.15)
        assert statement.deductions.irs == 0.0
        assert statement.net_salary == pytest.approx(289.35)

    def test_repeated_calls_are_identical(self, finance_settings, march_sessions):
        first = calculate_period_statement(march_sessions, MARCH, finance_settings)
        second = calculate_period_statement(march_sessions, MARCH, finance_settings)

        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_window_bounds_are_inclusive(self, finance_settings, make_session):
        last_moment = datetime.datetime(2025, 3, 31, 23, 59, 59)
        sessions = [
            make_session(datetime.date(2025, 3, 1), regular=8, hour=0),
            make_session(datetime.date(2025, 3, 31), regular=8, hour=23),
        ]
        sessions.append(sessions[1].model_copy(update={"clock_in": sessions[1].clock_in.replace(minute=59, second=59)}))

        statement = calculate_period_statement(sessions, MARCH, finance_settings)

        assert statement.session_count == 3
        assert sessions[2].clock_in.replace(tzinfo=None) == last_moment

    def test_date_only_range_includes_last_day(self, finance_settings, make_session):
        """A "YYYY-MM-DD" end closes the window at the end of that day."""
        date_only = DateRange(start="2025-03-01", end="2025-03-31")
        sessions = [
            make_session(datetime.date(2025, 3, 1), regular=8, hour=0),
            make_session(datetime.date(2025, 3, 31), regular=8, hour=18),
        ]

        statement = calculate_period_statement(sessions, date_only, finance_settings)

        assert date_only.start == start_of_day(datetime.date(2025, 3, 1))
        assert date_only.end == end_of_day(datetime.date(2025, 3, 31))
        assert statement.session_count == 2
        assert statement.model_dump() == calculate_period_statement(sessions, MARCH, finance_settings).model_dump()

    def test_meal_amounts_and_subsidy(self, make_session):
        settings = FinanceSettings(hourly_rate=10.0, meal_allowance_included=True, daily_meal_subsidy=6.0)
        sessions = [
            make_session(datetime.date(2025, 3, 3), regular=8, lunch_amount=5.0),
            make_session(datetime.date(2025, 3, 4), regular=8, had_dinner=True, dinner_amount=8.0),
        ]

        statement = calculate_period_statement(sessions, MARCH, settings)

        assert statement.earnings.meal_allowances == pytest.approx(13.0)
        assert statement.earnings.meal_subsidy == pytest.approx(12.0)
        assert statement.earnings.gross_salary == pytest.approx(160.0 + 13.0 + 12.0)

    def test_meal_card_reduces_net(self, march_sessions):
        settings = FinanceSettings(hourly_rate=10.0, tax_deduction_mode="irs", meal_card_deduction=20.0)

        statement = calculate_period_statement(march_sessions, MARCH, settings)

        assert statement.deductions.total == 0.0
        assert statement.net_salary == pytest.approx(statement.earnings.gross_salary - 20.0)

    def test_fixed_supplement_returned_verbatim(self, march_sessions):
        settings = FinanceSettings(hourly_rate=10.0, exempt_calculation_method="fixed", exempt_fixed_amount=150.0)

        statement = calculate_period_statement(march_sessions, MARCH, settings)

        assert statement.earnings.exempt_supplement == 150.0

    def test_fixed_supplement_on_short_window_logs_warning(self, march_sessions, caplog):
        settings = FinanceSettings(hourly_rate=10.0, exempt_calculation_method="fixed", exempt_fixed_amount=150.0)
        week = DateRange(start=start_of_day(datetime.date(2025, 3, 10)), end=end_of_day(datetime.date(2025, 3, 16)))

        with caplog.at_level(logging.WARNING, logger="clockin.core.finance.period"):
            statement = calculate_period_statement(march_sessions, week, settings)

        assert statement.earnings.exempt_supplement == 150.0
        assert any("Fixed Isenção amount" in r.getMessage() for r in caplog.records)


class TestWorkingDays:
    def test_distinct_calendar_days(self, make_session):
        sessions = [
            make_session(datetime.date(2025, 3, 3), regular=4, hour=8),
            make_session(datetime.date(2025, 3, 3), regular=4, hour=14),
            make_session(datetime.date(2025, 3, 4), regular=8),
        ]
        assert count_working_days(sessions) == 2

    def test_supplement_counts_days_not_sessions(self, finance_settings, make_session):
        sessions = [make_session(datetime.date(2025, 3, 3), regular=2, hour=h) for h in (8, 11, 14, 17)]

        statement = calculate_period_statement(sessions, MARCH, finance_settings)

        assert statement.working_days == 1
        assert statement.earnings.exempt_supplement == pytest.approx(2.5)


class TestItemization:
    def test_supplement_attributed_once_per_day(self, finance_settings, march_sessions):
        items = itemize_sessions(march_sessions, finance_settings, working_days=2)

        assert [item.id for item in items] == ["a", "b", "c"]
        assert [item.exempt_earnings for item in items] == pytest.approx([2.5, 0.0, 2.5])

    def test_items_match_statement_components(self, finance_settings, march_sessions):
        statement = calculate_period_statement(march_sessions, MARCH, finance_settings)
        items = statement.sessions

        assert sum(i.base_earnings for i in items) == pytest.approx(statement.earnings.base_salary)
        assert sum(i.overtime_earnings for i in items) == pytest.approx(statement.earnings.overtime)
        assert sum(i.exempt_earnings for i in items) == pytest.approx(statement.earnings.exempt_supplement)

    def test_line_total(self, finance_settings, march_sessions):
        weekend_item = itemize_sessions(march_sessions, finance_settings, working_days=2)[2]

        assert weekend_item.is_weekend is True
        assert weekend_item.total_earnings == pytest.approx(80.0 + 2.5 + 30.0 + 100.0)

    def test_fixed_amount_spread_for_display(self, march_sessions):
        settings = FinanceSettings(hourly_rate=10.0, exempt_calculation_method="fixed", exempt_fixed_amount=150.0)

        items = itemize_sessions(march_sessions, settings, working_days=2)

        assert [item.exempt_earnings for item in items] == pytest.approx([75.0, 0.0, 75.0])
